# sitecms/utils/pagination.py
"""
Keyset pagination for append-only tables (the audit trail).

Rows are walked newest first, ordered by (created_at DESC, id DESC). A
cursor names the last row of the previous page as "<ISO timestamp>|<id>".
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional, Tuple, Type, TypedDict

from sqlalchemy.orm import Query
from sqlalchemy.sql import and_, or_

from sitecms.domain.exceptions import ValidationError


class CursorMeta(TypedDict):
    has_more: bool
    next_cursor: Optional[str]
    prev_cursor: Optional[str]


def encode_cursor(created_at: datetime, row_id: Any) -> str:
    if not isinstance(created_at, datetime) or row_id is None:
        raise ValueError("created_at and row_id are required to encode cursor")
    return f"{created_at.isoformat()}|{row_id}"


def decode_cursor(cursor: str) -> Tuple[datetime, str]:
    """Split a cursor into (created_at, id); a malformed cursor is a ValidationError."""
    ts_str, sep, row_id = (cursor or "").partition("|")
    if not sep or not row_id:
        raise ValidationError("Invalid cursor format")
    try:
        return datetime.fromisoformat(ts_str), row_id
    except ValueError as exc:
        raise ValidationError("Invalid cursor timestamp") from exc


def apply_cursor(query: Query, *, model: Type[Any], cursor: Optional[str]) -> Query:
    """Restrict `query` to rows strictly older than the cursor row."""
    if not cursor:
        return query

    cursor_ts, cursor_id = decode_cursor(cursor)
    return query.filter(
        or_(
            model.created_at < cursor_ts,
            and_(model.created_at == cursor_ts, model.id < cursor_id),
        )
    )


def paginate_cursor(query: Query, *, model: Type[Any], limit: int) -> Tuple[List[Any], CursorMeta]:
    if limit <= 0:
        raise ValidationError("limit must be greater than zero")

    # One extra row tells whether another page exists.
    rows = query.order_by(model.created_at.desc(), model.id.desc()).limit(limit + 1).all()
    items = rows[:limit]
    has_more = len(rows) > limit

    next_cursor = None
    if items and has_more:
        next_cursor = encode_cursor(items[-1].created_at, items[-1].id)

    return items, {
        "has_more": has_more,
        "next_cursor": next_cursor,
        "prev_cursor": None,
    }
