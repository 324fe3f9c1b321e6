# sitecms/domain/images.py
"""
Editable image list of a collection item.

Editors submit one ordered list mixing images that are already stored
(`ExistingImage`) and raw uploads (`PendingImage`). Slot 0 is the main
image, the remaining slots form the gallery.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Tuple, Union


@dataclass(frozen=True)
class ExistingImage:
    path: str


@dataclass(frozen=True, eq=False)
class PendingImage:
    # eq=False: two uploads with identical bytes are still distinct slots.
    data: bytes
    filename: str
    content_type: Optional[str] = None
    alt: Optional[str] = None


ImageSlot = Union[ExistingImage, PendingImage]


def pending_images(slots: Sequence[ImageSlot]) -> List[PendingImage]:
    return [slot for slot in slots if isinstance(slot, PendingImage)]


def merge_image_slots(
    slots: Sequence[ImageSlot],
    uploaded: Mapping[PendingImage, str],
) -> List[str]:
    """
    Rebuild the ordered path list, replacing each pending slot with the
    path its upload produced. Existing slots pass through untouched.
    """
    paths: List[str] = []
    for slot in slots:
        if isinstance(slot, ExistingImage):
            paths.append(slot.path)
            continue

        if slot not in uploaded:
            raise ValueError(f"Pending image '{slot.filename}' has no uploaded path")
        paths.append(uploaded[slot])

    return paths


def split_main_and_gallery(paths: Sequence[str]) -> Tuple[Optional[str], List[str]]:
    if not paths:
        return None, []
    return paths[0], list(paths[1:])
