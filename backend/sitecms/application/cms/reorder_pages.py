from typing import Any, Dict, List
from sitecms.domain.batch import BatchResult
from sitecms.domain.invariants.block import assert_reorder_payload
from sitecms.models.page import Page
from sitecms.utils.audit import log_action
from sitecms.utils.order import apply_order
from sitecms.utils.transaction import transactional


def reorder_pages(
    *,
    site_id: str,
    items: List[Dict[str, Any]],
) -> BatchResult:
    """
    Apply new navigation positions `[{id, nav_order}]` in one transaction.
    Ids that do not belong to the site are reported in the result.
    """

    assert_reorder_payload(items, order_field="nav_order")

    ids = [item["id"] for item in items]
    pages = {
        page.id: page
        for page in Page.query.filter(Page.site_id == site_id, Page.id.in_(ids)).all()
    }

    with transactional():
        result = apply_order(pages, items, order_field="nav_order")

        log_action(
            action="page.reorder",
            entity_type="page",
            entity_id="*",
            payload={"count": len(result.succeeded), "failed": list(result.failed)},
            site_id=site_id,
        )

    return result
