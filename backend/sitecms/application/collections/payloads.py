# sitecms/application/collections/payloads.py
"""
Typed validation of editor payloads for collection items.

Each collection gets a pydantic model derived from the column types of its
writable fields, so "false", "12000" and "2025-03-14" arrive in the ORM as
bool, int and date, and junk is rejected before anything is flushed.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Type

from dateutil.parser import isoparse
from pydantic import BaseModel, ConfigDict, create_model, field_validator
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import JSON, Boolean, Date, DateTime, Integer, Numeric, String, Text

from sitecms.domain.exceptions import ValidationError
from .specs import CollectionSpec

_MODELS: Dict[str, Type[BaseModel]] = {}


def _python_type(column) -> Any:
    column_type = column.type
    if isinstance(column_type, Boolean):
        return bool
    if isinstance(column_type, Integer):
        return int
    if isinstance(column_type, Numeric):
        return float
    if isinstance(column_type, DateTime):
        return datetime
    if isinstance(column_type, Date):
        return date
    if isinstance(column_type, (String, Text)):
        return str
    if isinstance(column_type, JSON):
        return Any
    raise TypeError(f"Unsupported column type for {column.name}: {column_type!r}")


class _PayloadBase(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    @field_validator("*", mode="before")
    @classmethod
    def _normalise(cls, value, info):
        annotation = cls.model_fields[info.field_name].annotation
        if isinstance(value, str) and not value.strip() and annotation not in (str, Optional[str]):
            # Cleared form inputs for typed columns.
            return None
        if annotation in (date, Optional[date]):
            if isinstance(value, datetime):
                return value.date()
            if isinstance(value, str):
                return isoparse(value).date()
        return value


def payload_model(spec: CollectionSpec) -> Type[BaseModel]:
    model = _MODELS.get(spec.name)
    if model is not None:
        return model

    columns = spec.model.__table__.columns
    definitions = {}
    for name in spec.fields:
        column = columns[name]
        python_type = _python_type(column)
        annotation = Optional[python_type] if column.nullable and python_type is not Any else python_type
        definitions[name] = (annotation, None)

    model = create_model(f"{spec.model.__name__}Payload", __base__=_PayloadBase, **definitions)
    _MODELS[spec.name] = model
    return model


def validate_payload(spec: CollectionSpec, data: Dict[str, Any]) -> Dict[str, Any]:
    """Return the writable fields of `data`, converted to their column types."""
    try:
        payload = payload_model(spec).model_validate(data)
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        location = ".".join(str(part) for part in error["loc"])
        raise ValidationError(f"Invalid value for '{location}': {error['msg']}") from exc
    return payload.model_dump(exclude_unset=True)
