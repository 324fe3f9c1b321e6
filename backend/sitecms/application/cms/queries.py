# sitecms/application/cms/queries.py
"""Read side of the page/block store. Every lookup is scoped to a site."""
from typing import Any, Dict, List, Tuple

from sitecms.domain.blocks import block_type_catalogue
from sitecms.domain.exceptions import NotFound
from sitecms.models.block import Block
from sitecms.models.page import Page


def list_pages(*, site_id: str) -> List[Page]:
    return (
        Page.query.filter_by(site_id=site_id)
        .order_by(Page.nav_order.asc(), Page.title.asc())
        .all()
    )


def get_page(*, site_id: str, page_id: str) -> Page:
    page = Page.query.filter_by(id=page_id, site_id=site_id).first()
    if not page:
        raise NotFound("Page not found")
    return page


def get_page_by_slug(*, site_id: str, slug: str) -> Page:
    page = Page.query.filter_by(slug=slug, site_id=site_id).first()
    if not page:
        raise NotFound("Page not found")
    return page


def get_page_with_blocks(*, site_id: str, page_id: str) -> Tuple[Page, List[Block]]:
    page = get_page(site_id=site_id, page_id=page_id)
    blocks = (
        Block.query.filter_by(page_id=page.id, site_id=site_id)
        .order_by(Block.order.asc(), Block.created_at.asc(), Block.id.asc())
        .all()
    )
    return page, blocks


def get_block(*, site_id: str, block_id: str) -> Block:
    block = Block.query.filter_by(id=block_id, site_id=site_id).first()
    if not block:
        raise NotFound("Block not found")
    return block


def get_navigation(*, site_id: str) -> List[Dict[str, Any]]:
    pages = (
        Page.query.filter_by(site_id=site_id, is_public=True, show_in_nav=True)
        .order_by(Page.nav_order.asc(), Page.title.asc())
        .all()
    )
    return [
        {
            "id": page.id,
            "slug": page.slug,
            "label": page.nav_label or page.title,
            "nav_order": page.nav_order,
        }
        for page in pages
    ]


def get_block_types() -> List[Dict[str, Any]]:
    return block_type_catalogue()
