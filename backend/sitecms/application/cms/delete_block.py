from sitecms.extensions import db
from sitecms.utils.audit import log_action
from sitecms.utils.transaction import transactional
from .queries import get_block


def delete_block(
    *,
    site_id: str,
    block_id: str,
) -> None:
    """Remove one block; sibling order values are left untouched."""

    block = get_block(site_id=site_id, block_id=block_id)

    with transactional():
        db.session.delete(block)

        log_action(
            action="block.delete",
            entity_type="block",
            entity_id=block_id,
            payload={"page_id": block.page_id, "type": block.type},
            site_id=site_id,
        )
