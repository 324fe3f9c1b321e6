from typing import Any, Dict
from sqlalchemy import func
from sitecms.extensions import db
from sitecms.models.block import Block
from sitecms.domain.blocks import normalize_block_data
from sitecms.domain.invariants.block import assert_block_order, assert_block_type
from sitecms.utils.audit import log_action
from sitecms.utils.transaction import transactional
from .queries import get_page


def _next_order(page_id: str) -> int:
    current = db.session.query(func.max(Block.order)).filter(Block.page_id == page_id).scalar()
    return 0 if current is None else current + 1


def create_block(
    *,
    site_id: str,
    page_id: str,
    data: Dict[str, Any],
) -> Block:
    """
    Add a typed block to a page.

    The payload is validated against the block type's schema and stored
    with per-type defaults filled in. Without an explicit `order` the block
    is appended after the last one.
    """

    page = get_page(site_id=site_id, page_id=page_id)

    block_type = data.get("type")
    assert_block_type(block_type)

    order = data.get("order")
    if order is None:
        order = _next_order(page.id)
    assert_block_order(order)

    block = Block()
    block.site_id = site_id
    block.page_id = page.id
    block.type = block_type
    block.order = order
    block.data = normalize_block_data(block_type, data.get("data"))

    with transactional():
        db.session.add(block)
        db.session.flush()

        log_action(
            action="block.create",
            entity_type="block",
            entity_id=block.id,
            payload={"page_id": page.id, "type": block.type, "order": block.order},
            site_id=site_id,
        )

    return block
