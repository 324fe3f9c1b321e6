from sitecms.domain.batch import BatchResult

def apply_order(rows_by_id, items, order_field="order"):
    """
    Applies new order values to already-loaded rows in one pass.

    Entries whose id is not in `rows_by_id` (unknown, or owned by another
    site) are reported as failed; the rest are applied. Re-applying the same
    payload is a no-op. The caller commits all changes together.
    """
    result = BatchResult()

    for item in items:
        row = rows_by_id.get(item["id"])
        if row is None:
            result.failed[item["id"]] = "not found"
            continue

        if getattr(row, order_field) != item[order_field]:
            setattr(row, order_field, item[order_field])
        result.succeeded.append(row.id)

    return result
