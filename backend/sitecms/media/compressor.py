# sitecms/media/compressor.py
"""
Best-effort image compression.

Images over the size budget are scaled down (never up) to fit the
dimension box, then re-encoded as baseline JPEG at decreasing quality
until the output fits the budget or the quality floor is reached.
"""
from __future__ import annotations

import io
import logging
import mimetypes
import os
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from sitecms.domain.exceptions import DecodeError, EncodeError

logger = logging.getLogger(__name__)

QUALITY_START = 90
QUALITY_FLOOR = 10
QUALITY_STEP = 10

DEFAULT_MAX_SIZE_BYTES = 500 * 1024
DEFAULT_MAX_WIDTH = 1920
DEFAULT_MAX_HEIGHT = 1080


@dataclass(frozen=True)
class ImageFile:
    data: bytes
    filename: str
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)


def is_image(file: ImageFile) -> bool:
    content_type = file.content_type or mimetypes.guess_type(file.filename)[0] or ""
    return content_type.startswith("image/")


def fit_within(width: int, height: int, max_width: int, max_height: int) -> Tuple[int, int]:
    scale = min(1.0, max_width / width, max_height / height)
    return max(1, round(width * scale)), max(1, round(height * scale))


def _jpeg_filename(filename: str) -> str:
    stem, _ = os.path.splitext(filename or "image")
    return f"{stem or 'image'}.jpg"


def _to_rgb(img: Image.Image) -> Image.Image:
    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        rgba = img.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if img.mode != "RGB":
        return img.convert("RGB")
    return img


def _decode(file: ImageFile) -> Image.Image:
    try:
        img = Image.open(io.BytesIO(file.data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise DecodeError(f"Cannot decode image {file.filename}: {exc}") from exc
    return img


def _encode(img: Image.Image, quality: int) -> bytes:
    buffer = io.BytesIO()
    try:
        img.save(buffer, format="JPEG", quality=quality, optimize=False, progressive=False)
    except (OSError, ValueError) as exc:
        raise EncodeError(f"Cannot encode JPEG at quality {quality}: {exc}") from exc
    return buffer.getvalue()


def compress(
    file: ImageFile,
    max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES,
    max_width: int = DEFAULT_MAX_WIDTH,
    max_height: int = DEFAULT_MAX_HEIGHT,
) -> ImageFile:
    """
    Return `file` re-encoded under `max_size_bytes` where possible.

    Files already within budget and non-images come back unchanged. The
    budget is not guaranteed: once quality reaches the floor the last
    encoding is returned whatever its size.
    """
    if file.size <= max_size_bytes or not is_image(file):
        return file

    img = _decode(file)
    target = fit_within(img.width, img.height, max_width, max_height)
    if target != img.size:
        img = img.resize(target, Image.Resampling.LANCZOS)
    img = _to_rgb(img)

    quality = QUALITY_START
    while True:
        encoded = _encode(img, quality)
        logger.debug(
            "compress %s: quality=%s size=%.1fKB", file.filename, quality, len(encoded) / 1024
        )
        if len(encoded) <= max_size_bytes or quality <= QUALITY_FLOOR:
            break
        quality -= QUALITY_STEP

    logger.info(
        "compressed %s: %.1fKB -> %.1fKB (%sx%s, quality=%s)",
        file.filename, file.size / 1024, len(encoded) / 1024, target[0], target[1], quality,
    )
    return ImageFile(data=encoded, filename=_jpeg_filename(file.filename), content_type="image/jpeg")


def compress_or_original(file: ImageFile, **limits) -> ImageFile:
    """Compression failures keep the original bytes instead of failing the upload."""
    try:
        return compress(file, **limits)
    except (DecodeError, EncodeError) as exc:
        logger.warning("Compression failed, keeping original %s: %s", file.filename, exc)
        return file


def compress_many(files: Iterable[ImageFile], **limits) -> List[ImageFile]:
    return [compress_or_original(file, **limits) for file in files]
