from typing import Any, Dict
from sqlalchemy.exc import IntegrityError
from sitecms.models.page import Page
from sitecms.domain.exceptions import Conflict, ValidationError
from sitecms.domain.invariants.page import assert_page
from sitecms.utils.audit import log_action
from sitecms.utils.transaction import transactional
from .queries import get_page


ALLOWED_UPDATE_FIELDS = ("title", "slug", "is_public", "show_in_nav", "nav_label", "nav_order")
NAVIGATION_FIELDS = ("show_in_nav", "nav_label", "nav_order")


def update_page(
    *,
    site_id: str,
    page_id: str,
    data: Dict[str, Any],
    allowed_fields=ALLOWED_UPDATE_FIELDS,
) -> Page:
    """
    Update mutable fields on a page.

    Design rules:
    - Only whitelisted fields are mutable
    - No silent no-op updates
    - Invariants always revalidated
    """

    page = get_page(site_id=site_id, page_id=page_id)

    changed_fields: list[str] = []

    try:
        with transactional():
            for field in allowed_fields:
                if field in data and getattr(page, field) != data[field]:
                    setattr(page, field, data[field])
                    changed_fields.append(field)

            if not changed_fields and not any(field in data for field in allowed_fields):
                # Explicitly fail instead of silently succeeding
                raise ValidationError("No valid fields provided for update")

            # 🔒 Domain invariant enforcement
            assert_page(page)

            if changed_fields:
                log_action(
                    action="page.update",
                    entity_type="page",
                    entity_id=page.id,
                    payload={
                        "fields": changed_fields,
                    },
                    site_id=site_id,
                )

    except IntegrityError as exc:
        raise Conflict("A page with this slug already exists") from exc

    return page


def update_page_navigation(
    *,
    site_id: str,
    page_id: str,
    data: Dict[str, Any],
) -> Page:
    """Toggle nav visibility and/or set the nav label and position."""
    return update_page(
        site_id=site_id,
        page_id=page_id,
        data=data,
        allowed_fields=NAVIGATION_FIELDS,
    )
