# sitecms/application/cms/render_page.py
"""
Turns a stored page into render-ready blocks.

Known block types get their validated payload; `collection-list` blocks
additionally get the collection items their embedded filter selects.
Blocks that cannot be interpreted are passed through raw and flagged, so
one bad block never breaks the whole page.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from flask import current_app

from sitecms.application.collections.store import CollectionStore
from sitecms.domain.blocks import CollectionListBlockData, parse_block_data
from sitecms.domain.exceptions import NotFound
from sitecms.models.block import Block
from sitecms.models.page import Page
from .queries import get_page_by_slug, get_page_with_blocks


@dataclass
class RenderedBlock:
    block: Block
    data: Dict[str, Any]
    collection: Optional[str] = None
    items: Optional[List[Any]] = None
    fallback: bool = False


@dataclass
class RenderedPage:
    page: Page
    blocks: List[RenderedBlock] = field(default_factory=list)


def _render_block(site_id: str, block: Block) -> RenderedBlock:
    parsed = parse_block_data(block.type, block.data)
    if parsed is None:
        current_app.logger.warning(
            "Block %s has unrenderable type/data (%s), using raw fallback", block.id, block.type
        )
        return RenderedBlock(block=block, data=block.data or {}, fallback=True)

    rendered = RenderedBlock(block=block, data=parsed.model_dump(by_alias=True, exclude_none=True))

    if isinstance(parsed, CollectionListBlockData):
        try:
            store = CollectionStore(parsed.collection)
        except NotFound:
            current_app.logger.warning(
                "Block %s lists unknown collection '%s'", block.id, parsed.collection
            )
            rendered.fallback = True
            return rendered

        rendered.collection = store.spec.name
        rendered.items = store.list(site_id, parsed.filter, limit=parsed.limit)

    return rendered


def render_page(
    *,
    site_id: str,
    page_id: Optional[str] = None,
    slug: Optional[str] = None,
    public_only: bool = False,
) -> RenderedPage:
    if page_id is None:
        if slug is None:
            raise NotFound("Page not found")
        page_id = get_page_by_slug(site_id=site_id, slug=slug).id

    page, blocks = get_page_with_blocks(site_id=site_id, page_id=page_id)
    if public_only and not page.is_public:
        raise NotFound("Page not found")

    return RenderedPage(
        page=page,
        blocks=[_render_block(site_id, block) for block in blocks],
    )
