# sitecms/application/collections/images.py
"""
Image operations on collection items.

The editable image set of an item is one ordered list: slot 0 is written
to the main-image field, the remaining slots to the gallery field.
"""
from __future__ import annotations

from typing import List, Sequence

from flask import current_app

from sitecms.domain.exceptions import NotFound, ValidationError
from sitecms.domain.images import (
    ExistingImage,
    ImageSlot,
    PendingImage,
    merge_image_slots,
    pending_images,
    split_main_and_gallery,
)
from sitecms.extensions import db
from sitecms.media.pipeline import discard_paths, upload_image, upload_images
from sitecms.models.site import Site
from sitecms.utils.audit import log_action
from sitecms.utils.transaction import transactional
from .store import CollectionStore


def _require_images(store: CollectionStore) -> None:
    if not store.spec.has_images:
        raise ValidationError(f"{store.spec.name} items have no images")


def _write_paths(store: CollectionStore, item, paths: List[str]) -> None:
    spec = store.spec
    main, gallery = split_main_and_gallery(paths)
    setattr(item, spec.main_image_field, main)
    if spec.gallery_field:
        setattr(item, spec.gallery_field, gallery)


def save_item_images(
    store: CollectionStore,
    *,
    site_id: str,
    item_id: str,
    slots: Sequence[ImageSlot],
):
    """
    Persist the editor's ordered image list.

    1. Upload every pending slot (compress, store, register), in order.
    2. Substitute each pending slot with its uploaded path.
    3. Slot 0 becomes the main image, the rest the gallery.

    An upload failure raises UploadBatchError before the item is touched.
    """
    _require_images(store)
    spec = store.spec

    item = store.get(item_id, site_id)
    site = db.session.get(Site, site_id)

    if not spec.gallery_field and len(slots) > 1:
        raise ValidationError(f"{spec.name} items hold a single image")

    folder = store.folder_for(item, site)
    # Existing slots may only point at this item's own images.
    own_paths = set(spec.image_paths(item))
    for slot in slots:
        if isinstance(slot, ExistingImage) and slot.path not in own_paths and not slot.path.startswith(f"{folder}/"):
            raise ValidationError(f"Image {slot.path} does not belong to this item")

    uploaded, result = upload_images(site_id=site_id, folder=folder, uploads=pending_images(slots))
    paths = merge_image_slots(slots, uploaded)

    with transactional():
        _write_paths(store, item, paths)
        log_action(
            action=f"{spec.entity_type}.images",
            entity_type=spec.entity_type,
            entity_id=item.id,
            payload={"count": len(paths), "uploaded": len(result.succeeded)},
            site_id=site_id,
        )

    return item


def set_main_image(store: CollectionStore, *, site_id: str, item_id: str, upload: PendingImage):
    """
    Replace the main image. It is written in place under the fixed
    main.{ext} name, unless a reordered gallery still holds a main.* file of
    this item; then the new main image gets a fresh name.
    """
    _require_images(store)
    spec = store.spec

    item = store.get(item_id, site_id)
    previous = getattr(item, spec.main_image_field)
    folder = store.folder_for(item)

    gallery = (getattr(item, spec.gallery_field) or []) if spec.gallery_field else []
    in_place = not any(p.startswith(f"{folder}/main.") for p in gallery)

    path = upload_image(site_id=site_id, folder=folder, upload=upload, main=in_place)

    with transactional():
        setattr(item, spec.main_image_field, path)
        log_action(
            action=f"{spec.entity_type}.main_image",
            entity_type=spec.entity_type,
            entity_id=item.id,
            payload={"path": path},
            site_id=site_id,
        )

    if previous and previous != path and previous not in gallery:
        discard_paths(site_id=site_id, paths=[previous])

    return item


def add_gallery_image(store: CollectionStore, *, site_id: str, item_id: str, upload: PendingImage):
    _require_images(store)
    spec = store.spec
    if not spec.gallery_field:
        raise ValidationError(f"{spec.name} items have no gallery")

    item = store.get(item_id, site_id)
    path = upload_image(site_id=site_id, folder=store.folder_for(item), upload=upload)

    with transactional():
        # Assign a new list so the JSON column registers the change.
        setattr(item, spec.gallery_field, [*(getattr(item, spec.gallery_field) or []), path])
        log_action(
            action=f"{spec.entity_type}.gallery_add",
            entity_type=spec.entity_type,
            entity_id=item.id,
            payload={"path": path},
            site_id=site_id,
        )

    return item


def remove_image(store: CollectionStore, *, site_id: str, item_id: str, path: str):
    """Delete one image: storage object, registry row and field reference."""
    _require_images(store)
    spec = store.spec

    item = store.get(item_id, site_id)
    if path not in spec.image_paths(item):
        raise NotFound("Image not found on this item")

    discard_paths(site_id=site_id, paths=[path])

    with transactional():
        if getattr(item, spec.main_image_field) == path:
            setattr(item, spec.main_image_field, None)
        if spec.gallery_field:
            setattr(
                item,
                spec.gallery_field,
                [p for p in getattr(item, spec.gallery_field) or [] if p != path],
            )
        log_action(
            action=f"{spec.entity_type}.image_remove",
            entity_type=spec.entity_type,
            entity_id=item.id,
            payload={"path": path},
            site_id=site_id,
        )

    current_app.logger.info("Removed image %s from %s %s", path, spec.entity_type, item.id)
    return item


def clear_main_image(store: CollectionStore, *, site_id: str, item_id: str):
    _require_images(store)
    item = store.get(item_id, site_id)
    path = getattr(item, store.spec.main_image_field)
    if not path:
        return item
    return remove_image(store, site_id=site_id, item_id=item_id, path=path)
