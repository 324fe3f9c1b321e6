from sitecms.extensions import db
from sitecms.utils.audit import log_action
from sitecms.utils.transaction import transactional
from .queries import get_page


def delete_page(
    *,
    site_id: str,
    page_id: str,
) -> None:
    """
    Hard-delete a page and all its blocks.

    Blocks are deleted through the ORM so the cascade also holds on
    databases that do not enforce foreign keys (SQLite).
    """

    page = get_page(site_id=site_id, page_id=page_id)

    with transactional():
        # 🔥 Delete blocks first
        blocks = list(page.blocks)
        for block in blocks:
            db.session.delete(block)

        # 🔥 Delete page
        db.session.delete(page)

        log_action(
            action="page.delete",
            entity_type="page",
            entity_id=page_id,
            payload={
                "blocks_removed": len(blocks),
            },
            site_id=site_id,
        )
