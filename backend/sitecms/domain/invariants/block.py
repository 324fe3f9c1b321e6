from sitecms.domain.blocks import BLOCK_TYPES
from sitecms.domain.exceptions import InvariantViolation

def assert_block_type(block_type):
    if block_type not in BLOCK_TYPES:
        raise InvariantViolation(
            f"Unknown block type '{block_type}'. Allowed: {sorted(BLOCK_TYPES)}"
        )

def assert_block_order(order):
    if isinstance(order, bool) or not isinstance(order, int):
        raise InvariantViolation(f"Block order must be an integer: {order!r}")

    if order < 0:
        raise InvariantViolation(f"Block order must not be negative: {order}")

def assert_reorder_payload(items, order_field="order"):
    if not isinstance(items, list):
        raise InvariantViolation("Reorder payload must be a list")

    for item in items:
        if not isinstance(item, dict) or "id" not in item or order_field not in item:
            raise InvariantViolation(
                f"Each reorder entry needs 'id' and '{order_field}'"
            )
        assert_block_order(item[order_field])
