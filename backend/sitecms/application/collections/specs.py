# sitecms/application/collections/specs.py
"""
Per-collection configuration consumed by the generic CollectionStore.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple, Type

from sitecms.domain.exceptions import NotFound
from sitecms.models.announcement import Announcement
from sitecms.models.gallery_image import GalleryImage
from sitecms.models.program_event import ProgramEvent
from sitecms.models.repertoire_item import RepertoireItem
from sitecms.models.vehicle import Vehicle
from .program import prepare_program_event, prepare_repertoire_item


@dataclass(frozen=True)
class CollectionSpec:
    name: str
    model: Type[Any]
    entity_type: str
    # Columns an editor may write through create/update.
    fields: Tuple[str, ...]
    required: Tuple[str, ...] = ()
    date_fields: Tuple[str, ...] = ()
    main_image_field: Optional[str] = None
    gallery_field: Optional[str] = None
    featured_field: Optional[str] = None
    order_field: Optional[str] = None
    newest_field: str = "created_at"
    search_fields: Tuple[str, ...] = ()
    # Filter criterion -> column compared with ==
    exact_filters: Dict[str, str] = field(default_factory=dict)
    # Filter criterion -> (column, operator)
    range_filters: Dict[str, Tuple[str, str]] = field(default_factory=dict)
    # Item -> storage category, e.g. "cars" or "gallery/{category}"
    storage_category: Optional[Callable[[Any], str]] = None
    # (data, existing item or None, site_id) -> data, run before writes
    prepare: Optional[Callable[[Dict[str, Any], Any, str], Dict[str, Any]]] = None

    @property
    def has_images(self) -> bool:
        return self.main_image_field is not None

    def image_paths(self, item) -> list:
        paths = []
        if self.main_image_field and getattr(item, self.main_image_field):
            paths.append(getattr(item, self.main_image_field))
        if self.gallery_field:
            paths.extend(getattr(item, self.gallery_field) or [])
        return paths


VEHICLES = CollectionSpec(
    name="vehicles",
    model=Vehicle,
    entity_type="vehicle",
    fields=(
        "brand", "model", "year", "month", "price", "price_without_vat",
        "vat_deductible", "mileage", "fuel", "transmission", "body_type",
        "drivetrain", "engine", "power", "color", "doors", "vin",
        "description", "features", "source", "reserved", "reserved_until",
        "show_on_homepage",
    ),
    required=("brand", "model"),
    date_fields=("reserved_until",),
    main_image_field="image",
    gallery_field="images",
    featured_field="show_on_homepage",
    search_fields=("brand", "model", "description"),
    exact_filters={
        "fuel": "fuel",
        "transmission": "transmission",
        "brand": "brand",
        "body_type": "body_type",
    },
    range_filters={
        "min_price": ("price", ">="),
        "max_price": ("price", "<="),
        "min_year": ("year", ">="),
        "max_year": ("year", "<="),
    },
    storage_category=lambda item: "cars",
)

GALLERY = CollectionSpec(
    name="gallery",
    model=GalleryImage,
    entity_type="gallery_image",
    fields=("category", "alt_text", "display_order"),
    required=("category",),
    main_image_field="image_path",
    order_field="display_order",
    search_fields=("alt_text",),
    exact_filters={"category": "category"},
    storage_category=lambda item: f"gallery/{item.category}",
)

PROGRAM = CollectionSpec(
    name="program",
    model=ProgramEvent,
    entity_type="program_event",
    fields=(
        "slug", "category", "title", "subtitle", "author", "event_date",
        "day_name", "month", "time", "venue", "status", "price",
        "description", "published", "display_order",
    ),
    required=("category", "title"),
    date_fields=("event_date",),
    main_image_field="image_path",
    gallery_field="gallery_paths",
    order_field="display_order",
    search_fields=("title", "subtitle", "author"),
    exact_filters={"category": "category", "published": "published"},
    storage_category=lambda item: f"program/{item.category}",
    prepare=prepare_program_event,
)

REPERTOIRE = CollectionSpec(
    name="repertoire",
    model=RepertoireItem,
    entity_type="repertoire_item",
    fields=(
        "program_title", "slug", "subtitle", "category", "year", "venue",
        "display_order",
    ),
    required=("program_title",),
    main_image_field="image_path",
    gallery_field="gallery_paths",
    order_field="display_order",
    search_fields=("program_title", "subtitle"),
    exact_filters={"category": "category"},
    storage_category=lambda item: f"program/{item.category or 'general'}",
    prepare=prepare_repertoire_item,
)

ANNOUNCEMENTS = CollectionSpec(
    name="announcements",
    model=Announcement,
    entity_type="announcement",
    fields=("title", "description", "date", "category", "published", "show_on_homepage"),
    required=("title",),
    date_fields=("date",),
    featured_field="show_on_homepage",
    newest_field="date",
    search_fields=("title", "description"),
    exact_filters={"category": "category", "published": "published"},
)

COLLECTIONS: Dict[str, CollectionSpec] = {
    spec.name: spec
    for spec in (VEHICLES, GALLERY, PROGRAM, REPERTOIRE, ANNOUNCEMENTS)
}


def get_spec(name: str) -> CollectionSpec:
    spec = COLLECTIONS.get(name)
    if spec is None:
        raise NotFound(f"Unknown collection: {name}")
    return spec
