# sitecms/domain/filters.py
from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .exceptions import ValidationError


class FilterCriteria(BaseModel):
    """
    Collection filter as embedded in `collection-list` blocks and accepted
    on list endpoints (`featuredOnly`, `minPrice`, `fuel`, ...).

    Every criterion composes with AND; `search` is OR-ed across the text
    fields the target collection designates.
    """
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    featured_only: Optional[bool] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_year: Optional[int] = None
    max_year: Optional[int] = None
    fuel: Optional[str] = None
    transmission: Optional[str] = None
    brand: Optional[str] = None
    body_type: Optional[str] = None
    category: Optional[str] = None
    published: Optional[bool] = None
    search: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_unset(cls, value):
        # Query strings send "" for cleared form inputs.
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def active(self) -> dict:
        """Criteria that are actually set, keyed by field name."""
        return {
            name: value
            for name, value in self.model_dump(exclude_none=True).items()
            if not (name == "featured_only" and not value)
        }


class CollectionFilter(FilterCriteria):
    limit: Optional[int] = Field(default=None, ge=1, le=500)
    offset: int = Field(default=0, ge=0)

    @field_validator("offset", mode="before")
    @classmethod
    def _offset_default(cls, value):
        return 0 if value is None else value

    def criteria(self) -> FilterCriteria:
        return FilterCriteria(**self.model_dump(exclude={"limit", "offset"}))


def parse_collection_filter(params: Optional[Mapping[str, Any]]) -> CollectionFilter:
    """Build a CollectionFilter from query parameters or a plain dict."""
    try:
        return CollectionFilter.model_validate(dict(params or {}))
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        location = ".".join(str(part) for part in error["loc"])
        raise ValidationError(f"Invalid filter '{location}': {error['msg']}") from exc
