from flask import request
from datetime import timezone
from dateutil.parser import parse

from sitecms.domain.exceptions import Conflict, ValidationError


def normalize_ts(ts):
    """
    Ensure datetime is timezone-aware.
    Defaults to UTC if naive.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def enforce_optimistic_lock(entity):
    """
    Enforces optimistic locking using the If-Unmodified-Since header.
    Raises Conflict (409) if the entity has been modified since.
    """
    client_ts = request.headers.get("If-Unmodified-Since")
    if not client_ts:
        return  # No optimistic lock requested

    try:
        client_ts = normalize_ts(parse(client_ts))
    except (ValueError, OverflowError) as exc:
        raise ValidationError("Invalid If-Unmodified-Since header") from exc

    if entity.updated_at is None:
        return

    server_ts = normalize_ts(entity.updated_at)

    # HTTP dates carry whole seconds only.
    if client_ts.microsecond == 0:
        server_ts = server_ts.replace(microsecond=0)

    if server_ts > client_ts:
        raise Conflict("Conflict detected. Resource has been modified.")
