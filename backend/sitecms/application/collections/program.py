# sitecms/application/collections/program.py
"""Write hooks for theater program events and repertoire entries."""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from sitecms.domain.exceptions import Conflict, ValidationError
from sitecms.models.program_event import PROGRAM_STATUSES, ProgramEvent
from sitecms.utils.text import slugify

# Day names indexed Sunday-first.
SLOVAK_DAYS = ["nedela", "pondelok", "utorok", "streda", "stvrtok", "piatok", "sobota"]
SLOVAK_MONTHS = [
    "január", "február", "marec", "apríl", "máj", "jún",
    "júl", "august", "september", "október", "november", "december",
]


def day_name_for(value: date) -> str:
    return SLOVAK_DAYS[(value.weekday() + 1) % 7]


def month_name_for(value: date) -> str:
    return SLOVAK_MONTHS[value.month - 1]


def _slug_taken(site_id: str, slug: str, exclude_id: Optional[str]) -> bool:
    query = ProgramEvent.query.filter_by(site_id=site_id, slug=slug)
    if exclude_id:
        query = query.filter(ProgramEvent.id != exclude_id)
    return query.first() is not None


def _unique_slug(site_id: str, base: str, exclude_id: Optional[str]) -> str:
    candidate, suffix = base, 2
    while _slug_taken(site_id, candidate, exclude_id):
        candidate = f"{base}-{suffix}"
        suffix += 1
    return candidate


def prepare_program_event(data: Dict[str, Any], item, site_id: str) -> Dict[str, Any]:
    exclude_id = item.id if item is not None else None

    if data.get("slug"):
        slug = slugify(data["slug"])
        if not slug:
            raise ValidationError("Slug must contain letters or digits")
        if _slug_taken(site_id, slug, exclude_id):
            raise Conflict(f"A program event with slug '{slug}' already exists")
        data["slug"] = slug
    elif item is None or not item.slug:
        title = data.get("title") or (item.title if item is not None else "")
        data["slug"] = _unique_slug(site_id, slugify(title) or "event", exclude_id)

    if "status" in data and data["status"] not in PROGRAM_STATUSES:
        raise ValidationError(f"Invalid status '{data['status']}'. Allowed: {list(PROGRAM_STATUSES)}")

    event_date = data.get("event_date")
    if isinstance(event_date, date):
        data.setdefault("day_name", day_name_for(event_date))
        data.setdefault("month", month_name_for(event_date))

    return data


def prepare_repertoire_item(data: Dict[str, Any], item, site_id: str) -> Dict[str, Any]:
    if not data.get("slug") and (item is None or not item.slug):
        title = data.get("program_title") or (item.program_title if item is not None else "")
        data["slug"] = slugify(title) or None
    elif data.get("slug"):
        data["slug"] = slugify(data["slug"])
    return data
