# sitecms/media/pipeline.py
"""
Upload flow shared by every collection:
Image Compressor -> Storage Gateway -> Media Asset Registry.
"""
from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from sitecms.domain.batch import BatchResult
from sitecms.domain.exceptions import DomainError, StorageError, UploadBatchError, ValidationError
from sitecms.domain.images import PendingImage
from sitecms.storage.registry import get_storage
from sitecms.utils.media import allowed_file, gallery_image_path, guess_content_type, main_image_path
from sitecms.utils.transaction import transactional
from . import registry
from .compressor import ImageFile, compress_or_original


def _limits() -> Dict[str, int]:
    config = current_app.config
    return {
        "max_size_bytes": config["IMAGE_MAX_SIZE_KB"] * 1024,
        "max_width": config["IMAGE_MAX_WIDTH"],
        "max_height": config["IMAGE_MAX_HEIGHT"],
    }


def upload_image(
    *,
    site_id: str,
    folder: str,
    upload: PendingImage,
    main: bool = False,
) -> str:
    """
    Compress, store and register one image under `folder`.

    Main images use the fixed `main.{ext}` name and overwrite in place;
    other images get a random name and never overwrite.
    Returns the storage path.
    """
    if not allowed_file(upload.filename):
        raise ValidationError(f"File type not allowed: {upload.filename}")

    original = ImageFile(
        data=upload.data,
        filename=upload.filename,
        content_type=upload.content_type or guess_content_type(upload.filename),
    )
    file = compress_or_original(original, **_limits())

    path = main_image_path(folder, file.filename) if main else gallery_image_path(folder, file.filename)

    storage = get_storage()
    storage.put(path, file.data, overwrite=main, content_type=file.content_type)

    try:
        with transactional():
            registry.register(
                site_id=site_id,
                path=path,
                alt=upload.alt,
                metadata={
                    "original_filename": upload.filename,
                    "content_type": file.content_type,
                    "size_bytes": file.size,
                },
            )
    except SQLAlchemyError as exc:
        # Registry row missing: take the object back out so neither dangles.
        current_app.logger.error("Registering %s failed, removing object: %s", path, exc)
        storage.remove([path])
        raise StorageError(f"Failed to register {path}") from exc

    current_app.logger.info("Uploaded %s (%s bytes) for site %s", path, file.size, site_id)
    return path


def upload_images(
    *,
    site_id: str,
    folder: str,
    uploads: Sequence[PendingImage],
) -> Tuple[Dict[PendingImage, str], BatchResult]:
    """
    Upload files one by one, in order. The first failure stops the batch;
    files uploaded before it stay stored and registered and are reported in
    the UploadBatchError result.
    """
    uploaded: Dict[PendingImage, str] = {}
    result = BatchResult()

    for position, upload in enumerate(uploads):
        try:
            path = upload_image(site_id=site_id, folder=folder, upload=upload)
        except DomainError as exc:
            result.failed[upload.filename] = str(exc)
            for skipped in uploads[position + 1:]:
                result.failed.setdefault(skipped.filename, "not attempted")

            current_app.logger.warning(
                "Upload batch under %s stopped at %s: %s (%s)",
                folder, upload.filename, exc, result.summary,
            )
            raise UploadBatchError(
                f"Upload of {upload.filename} failed: {exc}", result=result
            ) from exc

        uploaded[upload] = path
        result.succeeded.append(path)

    return uploaded, result


def discard_paths(*, site_id: str, paths: List[str]) -> None:
    """Remove stored objects and their registry rows together."""
    if not paths:
        return
    get_storage().remove(paths)
    with transactional():
        for path in paths:
            registry.delete_by_path(path, site_id=site_id)
