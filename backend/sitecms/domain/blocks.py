# sitecms/domain/blocks.py
"""
Block payload schemas.

`Block.data` is a tagged union keyed by `Block.type`. Every known type has
a pydantic model here; payloads are validated and normalised at the store
boundary, unknown fields are dropped and missing ones take the per-type
defaults.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Type

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .filters import FilterCriteria
from .exceptions import ValidationError


class BlockData(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )


class HeroBlockData(BlockData):
    title: Optional[str] = None
    subtitle: Optional[str] = None
    background_image: Optional[str] = None
    cta_text: Optional[str] = None
    cta_link: Optional[str] = None


class CollectionListBlockData(BlockData):
    collection: str = "vehicles"
    layout: Literal["grid", "list"] = "grid"
    limit: int = Field(default=50, ge=1, le=500)
    filter: FilterCriteria = Field(default_factory=FilterCriteria)


class TextBlockData(BlockData):
    content: str = ""


class ImageBlockData(BlockData):
    src: str = ""
    alt: str = ""
    caption: str = ""


BLOCK_TYPES: Dict[str, Dict[str, Any]] = {
    "hero": {"name": "Hero", "schema": HeroBlockData},
    "collection-list": {"name": "Collection list", "schema": CollectionListBlockData},
    "text": {"name": "Text", "schema": TextBlockData},
    "image": {"name": "Image", "schema": ImageBlockData},
}


def schema_for(block_type: str) -> Optional[Type[BlockData]]:
    entry = BLOCK_TYPES.get(block_type)
    return entry["schema"] if entry else None


def normalize_block_data(block_type: str, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Validate `data` against the schema of `block_type` and return the
    canonical (camelCase) payload to persist.

    Raises ValidationError for unknown types or malformed payloads.
    """
    schema = schema_for(block_type)
    if schema is None:
        raise ValidationError(f"Unknown block type: {block_type}")

    if data is not None and not isinstance(data, dict):
        raise ValidationError("Block data must be an object")

    try:
        parsed = schema.model_validate(data or {})
    except PydanticValidationError as exc:
        raise ValidationError(
            f"Invalid data for '{block_type}' block: {exc.errors()[0]['msg']}"
        ) from exc

    return parsed.model_dump(by_alias=True, exclude_none=True)


def parse_block_data(block_type: str, data: Any) -> Optional[BlockData]:
    """Lenient read path: returns None when the payload cannot be interpreted."""
    schema = schema_for(block_type)
    if schema is None or not isinstance(data, dict):
        return None
    try:
        return schema.model_validate(data)
    except PydanticValidationError:
        return None


def block_type_catalogue() -> List[Dict[str, Any]]:
    return [
        {
            "id": block_type,
            "name": entry["name"],
            "schema": entry["schema"].model_json_schema(by_alias=True),
        }
        for block_type, entry in BLOCK_TYPES.items()
    ]
