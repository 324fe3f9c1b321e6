from typing import Any, Dict, List
from sitecms.domain.batch import BatchResult
from sitecms.domain.invariants.block import assert_reorder_payload
from sitecms.models.block import Block
from sitecms.utils.audit import log_action
from sitecms.utils.order import apply_order
from sitecms.utils.transaction import transactional


def reorder_blocks(
    *,
    site_id: str,
    items: List[Dict[str, Any]],
) -> BatchResult:
    """
    Apply `[{id, order}]` in one transaction. Blocks from several pages may
    be mixed in one call; ids outside the site are reported as failed.
    """

    assert_reorder_payload(items)

    ids = [item["id"] for item in items]
    blocks = {
        block.id: block
        for block in Block.query.filter(Block.site_id == site_id, Block.id.in_(ids)).all()
    }

    with transactional():
        result = apply_order(blocks, items)

        log_action(
            action="block.reorder",
            entity_type="block",
            entity_id="*",
            payload={"count": len(result.succeeded), "failed": list(result.failed)},
            site_id=site_id,
        )

    return result
