from typing import Any, Dict
from sqlalchemy.exc import IntegrityError
from sitecms.extensions import db
from sitecms.models.page import Page
from sitecms.domain.exceptions import Conflict, ValidationError
from sitecms.domain.invariants.page import assert_page
from sitecms.utils.audit import log_action
from sitecms.utils.text import slugify
from sitecms.utils.transaction import transactional


def create_page(
    *,
    site_id: str,
    data: Dict[str, Any],
) -> Page:
    """
    Create a new CMS page for a site.

    Edge cases handled:
    - Missing title (slug defaults to the slugified title)
    - Duplicate slug per site
    - Invariant violations
    """

    title: str | None = data.get("title")
    if not title:
        raise ValidationError("Title is required")

    page = Page()
    page.site_id = site_id
    page.title = title
    page.slug = data.get("slug") or slugify(title)
    page.is_public = bool(data.get("is_public", True))
    page.show_in_nav = bool(data.get("show_in_nav", False))
    page.nav_label = data.get("nav_label")
    page.nav_order = data.get("nav_order", 0)

    # 🔒 Domain invariants (single source of truth)
    assert_page(page)

    try:
        with transactional():
            db.session.add(page)
            db.session.flush()  # ensures page.id is available

            log_action(
                action="page.create",
                entity_type="page",
                entity_id=page.id,
                payload={
                    "title": page.title,
                    "slug": page.slug,
                },
                site_id=site_id,
            )

        return page

    except IntegrityError as exc:
        # Raised by the (site_id, slug) unique constraint
        raise Conflict("A page with this slug already exists") from exc
