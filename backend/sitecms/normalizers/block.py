def normalize_block(block, admin=False):
    base = {
        "id": block.id,
        "page_id": block.page_id,
        "type": block.type,
        "order": block.order,
        "data": block.data or {},
    }

    if admin:
        base["created_at"] = block.created_at.isoformat() if block.created_at else None
        base["updated_at"] = block.updated_at.isoformat() if block.updated_at else None

    return base
