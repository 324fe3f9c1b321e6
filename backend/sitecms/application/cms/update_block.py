from typing import Any, Dict
from sitecms.models.block import Block
from sitecms.domain.blocks import normalize_block_data
from sitecms.domain.exceptions import ValidationError
from sitecms.domain.invariants.block import assert_block_order, assert_block_type
from sitecms.utils.audit import log_action
from sitecms.utils.transaction import transactional
from .queries import get_block


def update_block(
    *,
    site_id: str,
    block_id: str,
    data: Dict[str, Any],
) -> Block:
    """
    Partial update of `type`, `order` and/or `data`.

    Changing the type re-validates the payload against the new schema;
    a type change without new data keeps whatever fields the new type
    understands.
    """

    block = get_block(site_id=site_id, block_id=block_id)

    if not any(field in data for field in ("type", "order", "data")):
        raise ValidationError("No valid fields provided for update")

    block_type = data.get("type", block.type)
    assert_block_type(block_type)

    if "order" in data:
        assert_block_order(data["order"])

    payload = data["data"] if "data" in data else block.data
    normalized = normalize_block_data(block_type, payload)

    changed_fields: list[str] = []

    with transactional():
        if block.type != block_type:
            block.type = block_type
            changed_fields.append("type")

        if "order" in data and block.order != data["order"]:
            block.order = data["order"]
            changed_fields.append("order")

        if block.data != normalized:
            block.data = normalized
            changed_fields.append("data")

        if changed_fields:
            log_action(
                action="block.update",
                entity_type="block",
                entity_id=block.id,
                payload={"fields": changed_fields},
                site_id=site_id,
            )

    return block


def update_block_data(
    *,
    site_id: str,
    block_id: str,
    data: Dict[str, Any],
) -> Block:
    """Replace only the payload of a block."""
    return update_block(site_id=site_id, block_id=block_id, data={"data": data})
