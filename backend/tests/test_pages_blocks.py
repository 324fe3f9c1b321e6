"""
Tests for the page/block store and page rendering.
"""

from datetime import datetime, timedelta

import pytest

from sitecms.application.cms.create_block import create_block
from sitecms.application.cms.create_page import create_page
from sitecms.application.cms.delete_block import delete_block
from sitecms.application.cms.delete_page import delete_page
from sitecms.application.cms.queries import (
    get_block_types,
    get_navigation,
    get_page_with_blocks,
    list_pages,
)
from sitecms.application.cms.render_page import render_page
from sitecms.application.cms.reorder_blocks import reorder_blocks
from sitecms.application.cms.reorder_pages import reorder_pages
from sitecms.application.cms.update_block import update_block, update_block_data
from sitecms.application.cms.update_page import update_page, update_page_navigation
from sitecms.application.collections.store import CollectionStore
from sitecms.domain.exceptions import Conflict, InvariantViolation, NotFound, ValidationError
from sitecms.extensions import db
from sitecms.models.block import Block


@pytest.fixture
def page(site):
    return create_page(site_id=site.id, data={"title": "Ponuka", "slug": "ponuka", "nav_order": 1})


class TestPages:
    """Page CRUD and navigation."""

    def test_create_page(self, site, page):
        assert page.slug == "ponuka"
        assert page.is_public is True
        assert page.show_in_nav is False

    def test_slug_defaults_to_slugified_title(self, site):
        page = create_page(site_id=site.id, data={"title": "Naše služby"})

        assert page.slug == "nase-sluzby"

    def test_duplicate_slug_conflicts(self, site, page):
        with pytest.raises(Conflict):
            create_page(site_id=site.id, data={"title": "Ponuka 2", "slug": "ponuka"})

    def test_same_slug_on_another_site(self, other_site, page):
        other = create_page(site_id=other_site.id, data={"title": "Ponuka", "slug": "ponuka"})

        assert other.site_id == other_site.id

    def test_invalid_slug(self, site):
        with pytest.raises(InvariantViolation):
            create_page(site_id=site.id, data={"title": "X", "slug": "Not A Slug"})

    def test_title_required(self, site):
        with pytest.raises(ValidationError):
            create_page(site_id=site.id, data={"slug": "no-title"})

    def test_update_page(self, site, page):
        update_page(site_id=site.id, page_id=page.id, data={"title": "Naša ponuka"})

        assert page.title == "Naša ponuka"

    def test_update_slug_collision(self, site, page):
        other = create_page(site_id=site.id, data={"title": "Kontakt", "slug": "kontakt"})

        with pytest.raises(Conflict):
            update_page(site_id=site.id, page_id=other.id, data={"slug": "ponuka"})

    def test_update_without_known_fields(self, site, page):
        with pytest.raises(ValidationError):
            update_page(site_id=site.id, page_id=page.id, data={"status": "published"})

    def test_navigation(self, site, page):
        contact = create_page(site_id=site.id, data={"title": "Kontakt", "nav_order": 0})
        hidden = create_page(site_id=site.id, data={"title": "Interné", "is_public": False})

        update_page_navigation(site_id=site.id, page_id=page.id, data={"show_in_nav": True, "nav_label": "Autá"})
        update_page_navigation(site_id=site.id, page_id=contact.id, data={"show_in_nav": True})
        update_page_navigation(site_id=site.id, page_id=hidden.id, data={"show_in_nav": True})

        assert [(entry["slug"], entry["label"]) for entry in get_navigation(site_id=site.id)] == [
            ("kontakt", "Kontakt"),
            ("ponuka", "Autá"),
        ]

    def test_navigation_update_ignores_other_fields(self, site, page):
        update_page_navigation(site_id=site.id, page_id=page.id, data={"show_in_nav": True, "title": "X"})

        assert page.title == "Ponuka"
        assert page.show_in_nav is True

    def test_reorder_pages(self, site, page):
        contact = create_page(site_id=site.id, data={"title": "Kontakt", "nav_order": 0})

        result = reorder_pages(site_id=site.id, items=[
            {"id": page.id, "nav_order": 0},
            {"id": contact.id, "nav_order": 1},
            {"id": "missing", "nav_order": 2},
        ])

        assert result.summary == "2 of 3 succeeded"
        assert [p.id for p in list_pages(site_id=site.id)] == [page.id, contact.id]

    def test_pages_of_other_sites_are_not_found(self, site, other_site, page):
        with pytest.raises(NotFound):
            update_page(site_id=other_site.id, page_id=page.id, data={"title": "Hijack"})

    def test_delete_page_cascades_to_blocks(self, site, page):
        create_block(site_id=site.id, page_id=page.id, data={"type": "text", "data": {"content": "a"}})
        create_block(site_id=site.id, page_id=page.id, data={"type": "text", "data": {"content": "b"}})

        delete_page(site_id=site.id, page_id=page.id)

        assert Block.query.count() == 0


class TestBlocks:
    """Typed block payloads and ordering."""

    def test_collection_list_defaults(self, site, page):
        block = create_block(site_id=site.id, page_id=page.id, data={"type": "collection-list"})

        assert block.data == {"collection": "vehicles", "layout": "grid", "limit": 50, "filter": {}}

    def test_unknown_fields_dropped(self, site, page):
        block = create_block(site_id=site.id, page_id=page.id, data={
            "type": "hero",
            "data": {"title": "Vitajte", "ctaText": "Ponuka", "script": "<script>"},
        })

        assert block.data == {"title": "Vitajte", "ctaText": "Ponuka"}

    def test_invalid_payload_rejected(self, site, page):
        with pytest.raises(ValidationError):
            create_block(site_id=site.id, page_id=page.id, data={
                "type": "collection-list",
                "data": {"layout": "carousel"},
            })

    def test_unknown_type_rejected(self, site, page):
        with pytest.raises(InvariantViolation):
            create_block(site_id=site.id, page_id=page.id, data={"type": "marquee"})

    def test_negative_order_rejected(self, site, page):
        with pytest.raises(InvariantViolation):
            create_block(site_id=site.id, page_id=page.id, data={"type": "text", "order": -1})

    def test_blocks_append_after_last(self, site, page):
        create_block(site_id=site.id, page_id=page.id, data={"type": "text", "order": 5})

        appended = create_block(site_id=site.id, page_id=page.id, data={"type": "text"})

        assert appended.order == 6

    def test_first_block_gets_order_zero(self, site, page):
        assert create_block(site_id=site.id, page_id=page.id, data={"type": "text"}).order == 0

    def test_blocks_sorted_with_insertion_tiebreak(self, site, page):
        start = datetime(2024, 1, 1)
        late = create_block(site_id=site.id, page_id=page.id, data={"type": "text", "order": 2})
        tie_first = create_block(site_id=site.id, page_id=page.id, data={"type": "text", "order": 1})
        tie_second = create_block(site_id=site.id, page_id=page.id, data={"type": "text", "order": 1})
        for offset, block in enumerate((late, tie_first, tie_second)):
            block.created_at = start + timedelta(seconds=offset)
        db.session.commit()

        _, blocks = get_page_with_blocks(site_id=site.id, page_id=page.id)

        assert [b.id for b in blocks] == [tie_first.id, tie_second.id, late.id]

    def test_update_block_type_revalidates_data(self, site, page):
        block = create_block(site_id=site.id, page_id=page.id, data={
            "type": "image",
            "data": {"src": "a.jpg", "alt": "A", "caption": "C"},
        })

        update_block(site_id=site.id, block_id=block.id, data={"type": "text"})

        assert block.type == "text"
        assert block.data == {"content": ""}

    def test_update_block_data_only(self, site, page):
        block = create_block(site_id=site.id, page_id=page.id, data={"type": "text", "order": 3})

        update_block_data(site_id=site.id, block_id=block.id, data={"content": "<p>Ahoj</p>"})

        assert block.order == 3
        assert block.data == {"content": "<p>Ahoj</p>"}

    def test_reorder_blocks(self, site, page):
        a = create_block(site_id=site.id, page_id=page.id, data={"type": "text"})
        b = create_block(site_id=site.id, page_id=page.id, data={"type": "text"})

        result = reorder_blocks(site_id=site.id, items=[{"id": a.id, "order": 1}, {"id": b.id, "order": 0}])

        assert result.ok
        _, blocks = get_page_with_blocks(site_id=site.id, page_id=page.id)
        assert [blk.id for blk in blocks] == [b.id, a.id]

    def test_delete_block(self, site, page):
        block = create_block(site_id=site.id, page_id=page.id, data={"type": "text"})

        delete_block(site_id=site.id, block_id=block.id)

        with pytest.raises(NotFound):
            delete_block(site_id=site.id, block_id=block.id)

    def test_blocks_of_other_sites_are_not_found(self, site, other_site, page):
        block = create_block(site_id=site.id, page_id=page.id, data={"type": "text"})

        with pytest.raises(NotFound):
            update_block_data(site_id=other_site.id, block_id=block.id, data={"content": "x"})

    def test_block_type_catalogue(self):
        catalogue = {entry["id"]: entry for entry in get_block_types()}

        assert set(catalogue) == {"hero", "collection-list", "text", "image"}
        props = catalogue["collection-list"]["schema"]["properties"]
        assert props["layout"]["default"] == "grid"
        assert props["limit"]["default"] == 50
        assert "backgroundImage" in catalogue["hero"]["schema"]["properties"]


class TestRenderPage:
    """Rendering resolves collection-list blocks through the collection store."""

    def test_featured_vehicle_listing(self, site, page):
        vehicles = CollectionStore("vehicles")
        for number in range(3):
            vehicles.create(site.id, {"brand": "Skoda", "model": f"Octavia {number}", "show_on_homepage": True})
        for number in range(4):
            vehicles.create(site.id, {"brand": "Audi", "model": f"A{number}"})

        create_block(site_id=site.id, page_id=page.id, data={
            "type": "collection-list",
            "order": 0,
            "data": {"layout": "grid", "limit": 10, "filter": {"featuredOnly": True}},
        })

        rendered = render_page(site_id=site.id, slug="ponuka")

        block = rendered.blocks[0]
        assert block.collection == "vehicles"
        assert block.data["filter"] == {"featuredOnly": True}
        assert 0 < len(block.items) <= 10
        assert all(item.show_on_homepage for item in block.items)

    def test_limit_applies(self, site, page):
        vehicles = CollectionStore("vehicles")
        for number in range(5):
            vehicles.create(site.id, {"brand": "Skoda", "model": f"Fabia {number}"})
        create_block(site_id=site.id, page_id=page.id, data={"type": "collection-list", "data": {"limit": 2}})

        rendered = render_page(site_id=site.id, page_id=page.id)

        assert len(rendered.blocks[0].items) == 2

    def test_listing_stays_within_site(self, site, other_site, page):
        CollectionStore("vehicles").create(other_site.id, {"brand": "Tatra", "model": "603"})
        create_block(site_id=site.id, page_id=page.id, data={"type": "collection-list"})

        rendered = render_page(site_id=site.id, page_id=page.id)

        assert rendered.blocks[0].items == []

    def test_unknown_block_type_falls_back_to_raw(self, site, page):
        legacy = Block()
        legacy.site_id = site.id
        legacy.page_id = page.id
        legacy.type = "legacy-widget"
        legacy.order = 0
        legacy.data = {"html": "<marquee>"}
        db.session.add(legacy)
        db.session.commit()
        create_block(site_id=site.id, page_id=page.id, data={"type": "text", "data": {"content": "ok"}})

        rendered = render_page(site_id=site.id, page_id=page.id)

        assert rendered.blocks[0].fallback is True
        assert rendered.blocks[0].data == {"html": "<marquee>"}
        assert rendered.blocks[1].data == {"content": "ok"}

    def test_unknown_collection_falls_back(self, site, page):
        create_block(site_id=site.id, page_id=page.id, data={
            "type": "collection-list",
            "data": {"collection": "spaceships"},
        })

        rendered = render_page(site_id=site.id, page_id=page.id)

        assert rendered.blocks[0].fallback is True
        assert rendered.blocks[0].items is None

    def test_private_page_hidden_from_public_render(self, site):
        create_page(site_id=site.id, data={"title": "Interné", "slug": "interne", "is_public": False})

        with pytest.raises(NotFound):
            render_page(site_id=site.id, slug="interne", public_only=True)
