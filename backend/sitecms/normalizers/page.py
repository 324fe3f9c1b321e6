from .block import normalize_block


def normalize_page(page, admin=False, blocks=None):
    base = {
        "id": page.id,
        "title": page.title,
        "slug": page.slug,
        "is_public": page.is_public,
        "show_in_nav": page.show_in_nav,
        "nav_label": page.nav_label,
        "nav_order": page.nav_order,
    }

    if admin:
        base["created_at"] = page.created_at.isoformat() if page.created_at else None
        base["updated_at"] = page.updated_at.isoformat() if page.updated_at else None

    if blocks is not None:
        base["blocks"] = [normalize_block(block, admin=admin) for block in blocks]

    return base


def normalize_rendered_page(rendered):
    from .collection import normalize_item

    page = normalize_page(rendered.page)
    page["blocks"] = []

    for entry in rendered.blocks:
        block = {
            "id": entry.block.id,
            "type": entry.block.type,
            "order": entry.block.order,
            "data": entry.data,
        }
        if entry.fallback:
            block["fallback"] = True
        if entry.items is not None:
            block["collection"] = entry.collection
            block["items"] = [normalize_item(item) for item in entry.items]
        page["blocks"].append(block)

    return page
