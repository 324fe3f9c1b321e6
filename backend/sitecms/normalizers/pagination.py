# sitecms/normalizers/pagination.py
from typing import Any, Callable, Dict, List, Optional

from sitecms.utils.pagination import CursorMeta


def normalize_pagination(
    items: List[Any],
    normalize_fn: Callable[[Any], Dict[str, Any]],
    *,
    cursor: Optional[CursorMeta] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    total: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Wrap a page of rows as {"items": [...], "pagination": {...}}.

    Keyset pages (audit trail) pass `cursor`; collection listings pass
    limit/offset and the total match count.
    """
    response: Dict[str, Any] = {"items": [normalize_fn(item) for item in items]}

    if cursor is not None:
        response["pagination"] = dict(cursor)
        return response

    pagination: Dict[str, Any] = {}
    if limit is not None or offset:
        pagination.update(limit=limit, offset=offset or 0)
    if total is not None:
        pagination["total"] = total
    if pagination:
        response["pagination"] = pagination

    return response
