"""
Tests for the image list merge, the upload pipeline and the media asset
registry.
"""

import pytest

from sitecms.application.collections import images as item_images
from sitecms.application.collections.store import CollectionStore
from sitecms.domain.exceptions import NotFound, UploadBatchError, ValidationError
from sitecms.domain.images import (
    ExistingImage,
    PendingImage,
    merge_image_slots,
    split_main_and_gallery,
)
from sitecms.extensions import db
from sitecms.media import registry
from sitecms.models.media_asset import MediaAsset
from sitecms.storage.registry import get_storage


@pytest.fixture
def vehicles():
    return CollectionStore("vehicles")


@pytest.fixture
def vehicle(vehicles, site):
    return vehicles.create(site.id, {"brand": "Skoda", "model": "Superb"})


@pytest.fixture
def pending(image_bytes):
    def _make(filename="photo.png", **kwargs):
        return PendingImage(data=image_bytes(**kwargs), filename=filename, content_type="image/png")
    return _make


class TestMergeImageSlots:
    """Pure merge of existing and pending slots."""

    def test_pending_slots_replaced_in_place(self):
        upload = PendingImage(data=b"x", filename="new.jpg")
        slots = [ExistingImage("a.jpg"), upload, ExistingImage("b.jpg")]

        paths = merge_image_slots(slots, {upload: "new-path.jpg"})

        assert paths == ["a.jpg", "new-path.jpg", "b.jpg"]

    def test_identical_uploads_are_distinct_slots(self):
        first = PendingImage(data=b"same", filename="same.jpg")
        second = PendingImage(data=b"same", filename="same.jpg")

        paths = merge_image_slots([first, second], {first: "one.jpg", second: "two.jpg"})

        assert paths == ["one.jpg", "two.jpg"]

    def test_missing_upload_is_an_error(self):
        with pytest.raises(ValueError):
            merge_image_slots([PendingImage(data=b"x", filename="x.jpg")], {})

    def test_split(self):
        assert split_main_and_gallery(["a", "b", "c"]) == ("a", ["b", "c"])
        assert split_main_and_gallery([]) == (None, [])


class TestSaveItemImages:
    """Saving the ordered image list of an item."""

    def test_round_trip_with_pending_at_position_one(self, vehicles, site, vehicle, pending):
        item_images.save_item_images(
            vehicles, site_id=site.id, item_id=vehicle.id,
            slots=[pending("front.png"), pending("back.png")],
        )
        first, second = vehicle.image, vehicle.images[0]

        item_images.save_item_images(
            vehicles, site_id=site.id, item_id=vehicle.id,
            slots=[ExistingImage(first), pending("interior.png"), ExistingImage(second)],
        )

        assert vehicle.image == first
        assert len(vehicle.images) == 2
        assert vehicle.images[1] == second
        new_path = vehicle.images[0]
        assert new_path.startswith(f"autobazar/cars/{vehicle.id}/gallery-")
        assert get_storage().exists(new_path)
        assert registry.find_by_path(new_path, site_id=site.id) is not None

    def test_reordering_existing_images_only(self, vehicles, site, vehicle, pending):
        item_images.save_item_images(
            vehicles, site_id=site.id, item_id=vehicle.id,
            slots=[pending("a.png"), pending("b.png"), pending("c.png")],
        )
        a, b, c = vehicle.image, *vehicle.images

        item_images.save_item_images(
            vehicles, site_id=site.id, item_id=vehicle.id,
            slots=[ExistingImage(c), ExistingImage(a), ExistingImage(b)],
        )

        assert vehicle.image == c
        assert vehicle.images == [a, b]

    def test_empty_list_clears_both_fields(self, vehicles, site, vehicle, pending):
        item_images.save_item_images(
            vehicles, site_id=site.id, item_id=vehicle.id,
            slots=[pending("a.png"), pending("b.png")],
        )

        item_images.save_item_images(vehicles, site_id=site.id, item_id=vehicle.id, slots=[])

        assert vehicle.image is None
        assert vehicle.images == []

    def test_foreign_existing_path_rejected(self, vehicles, site, vehicle):
        with pytest.raises(ValidationError):
            item_images.save_item_images(
                vehicles, site_id=site.id, item_id=vehicle.id,
                slots=[ExistingImage("divadlo/program/cinohra/1/main.jpg")],
            )

    def test_other_items_image_rejected(self, vehicles, site, vehicle, pending):
        neighbour = vehicles.create(site.id, {"brand": "Audi", "model": "A4"})
        item_images.add_gallery_image(vehicles, site_id=site.id, item_id=neighbour.id, upload=pending("a.png"))
        borrowed = neighbour.images[0]

        with pytest.raises(ValidationError):
            item_images.save_item_images(
                vehicles, site_id=site.id, item_id=vehicle.id,
                slots=[ExistingImage(borrowed)],
            )

        # Purging this item must leave the neighbour's file alone.
        vehicles.soft_delete(vehicle.id, site.id)
        vehicles.permanent_delete(vehicle.id, site.id)

        assert get_storage().exists(borrowed)
        assert registry.find_by_path(borrowed, site_id=site.id) is not None

    def test_failed_upload_stops_batch_and_keeps_earlier_files(self, vehicles, site, vehicle, pending):
        slots = [
            pending("first.png"),
            PendingImage(data=b"plain text", filename="notes.txt", content_type="text/plain"),
            pending("third.png"),
        ]

        with pytest.raises(UploadBatchError) as excinfo:
            item_images.save_item_images(vehicles, site_id=site.id, item_id=vehicle.id, slots=slots)

        result = excinfo.value.result
        assert len(result.succeeded) == 1
        assert "notes.txt" in result.failed
        assert result.failed["third.png"] == "not attempted"
        assert result.summary == "1 of 3 succeeded"
        # The earlier upload stays stored and registered; the item is untouched.
        assert get_storage().exists(result.succeeded[0])
        assert registry.find_by_path(result.succeeded[0], site_id=site.id) is not None
        assert vehicle.image is None

    def test_gallery_items_hold_one_image(self, site, pending):
        gallery = CollectionStore("gallery")
        item = gallery.create(site.id, {"category": "showroom"})

        with pytest.raises(ValidationError):
            item_images.save_item_images(
                gallery, site_id=site.id, item_id=item.id,
                slots=[pending("a.png"), pending("b.png")],
            )

        item_images.save_item_images(gallery, site_id=site.id, item_id=item.id, slots=[pending("a.png")])
        assert item.image_path.startswith(f"autobazar/gallery/showroom/{item.id}/")

    def test_collections_without_images(self, site):
        announcements = CollectionStore("announcements")
        item = announcements.create(site.id, {"title": "Oznam"})

        with pytest.raises(ValidationError):
            item_images.save_item_images(announcements, site_id=site.id, item_id=item.id, slots=[])


class TestSingleImageOperations:
    """Main image replacement, gallery append and removal."""

    def test_main_image_overwrites_in_place(self, vehicles, site, vehicle, pending):
        item_images.set_main_image(vehicles, site_id=site.id, item_id=vehicle.id, upload=pending("a.png"))
        first_path = vehicle.image

        item_images.set_main_image(
            vehicles, site_id=site.id, item_id=vehicle.id, upload=pending("b.png", color=(0, 0, 255))
        )

        assert vehicle.image == first_path == f"autobazar/cars/{vehicle.id}/main.png"
        assert MediaAsset.query.filter_by(path=first_path).count() == 1

    def test_main_image_never_overwrites_a_gallery_entry(self, vehicles, site, vehicle, pending):
        item_images.set_main_image(vehicles, site_id=site.id, item_id=vehicle.id, upload=pending("a.png"))
        item_images.add_gallery_image(
            vehicles, site_id=site.id, item_id=vehicle.id, upload=pending("b.png", color=(0, 200, 0))
        )
        main, gallery_path = vehicle.image, vehicle.images[0]
        # Promote the gallery photo; the old main.png now lives in the gallery.
        item_images.save_item_images(
            vehicles, site_id=site.id, item_id=vehicle.id,
            slots=[ExistingImage(gallery_path), ExistingImage(main)],
        )
        kept_bytes = get_storage().read(main)

        item_images.set_main_image(
            vehicles, site_id=site.id, item_id=vehicle.id, upload=pending("c.png", color=(0, 0, 255))
        )

        assert vehicle.images == [main]
        assert vehicle.image != main
        assert vehicle.image.startswith(f"autobazar/cars/{vehicle.id}/gallery-")
        assert get_storage().read(main) == kept_bytes
        assert get_storage().exists(vehicle.image)
        # The replaced main image (the promoted gallery photo) is discarded.
        assert not get_storage().exists(gallery_path)

    def test_main_image_with_new_extension_discards_old_object(self, vehicles, site, vehicle, pending, image_bytes):
        item_images.set_main_image(vehicles, site_id=site.id, item_id=vehicle.id, upload=pending("a.png"))
        old_path = vehicle.image

        item_images.set_main_image(
            vehicles, site_id=site.id, item_id=vehicle.id,
            upload=PendingImage(data=image_bytes(fmt="JPEG"), filename="b.jpg", content_type="image/jpeg"),
        )

        assert vehicle.image.endswith("/main.jpg")
        assert not get_storage().exists(old_path)
        assert registry.find_by_path(old_path, site_id=site.id) is None

    def test_add_gallery_image_appends(self, vehicles, site, vehicle, pending):
        item_images.add_gallery_image(vehicles, site_id=site.id, item_id=vehicle.id, upload=pending("a.png"))
        item_images.add_gallery_image(vehicles, site_id=site.id, item_id=vehicle.id, upload=pending("b.png"))

        assert len(vehicle.images) == 2
        assert vehicle.images[0] != vehicle.images[1]

    def test_remove_image_clears_every_trace(self, vehicles, site, vehicle, pending):
        item_images.add_gallery_image(vehicles, site_id=site.id, item_id=vehicle.id, upload=pending("a.png"))
        path = vehicle.images[0]

        item_images.remove_image(vehicles, site_id=site.id, item_id=vehicle.id, path=path)

        assert vehicle.images == []
        assert not get_storage().exists(path)
        assert registry.find_by_path(path, site_id=site.id) is None

    def test_remove_unknown_image(self, vehicles, site, vehicle):
        with pytest.raises(NotFound):
            item_images.remove_image(
                vehicles, site_id=site.id, item_id=vehicle.id, path="autobazar/cars/x/main.jpg"
            )

    def test_clear_main_image_keeps_gallery(self, vehicles, site, vehicle, pending):
        item_images.save_item_images(
            vehicles, site_id=site.id, item_id=vehicle.id,
            slots=[pending("a.png"), pending("b.png")],
        )
        gallery = list(vehicle.images)

        item_images.clear_main_image(vehicles, site_id=site.id, item_id=vehicle.id)

        assert vehicle.image is None
        assert vehicle.images == gallery


class TestUploadPipeline:
    """Compression inside the upload flow."""

    def test_oversized_image_stored_as_jpeg(self, app, vehicles, site, vehicle, pending):
        app.config["IMAGE_MAX_SIZE_KB"] = 20

        item_images.add_gallery_image(
            vehicles, site_id=site.id, item_id=vehicle.id,
            upload=pending("big.png", width=400, height=300, noise=True),
        )

        path = vehicle.images[0]
        assert path.endswith(".jpg")
        asset = registry.find_by_path(path, site_id=site.id)
        assert asset.meta["content_type"] == "image/jpeg"
        assert asset.meta["original_filename"] == "big.png"

    def test_undecodable_image_uploaded_as_original(self, app, vehicles, site, vehicle):
        app.config["IMAGE_MAX_SIZE_KB"] = 1
        data = b"not an image at all" * 200

        item_images.add_gallery_image(
            vehicles, site_id=site.id, item_id=vehicle.id,
            upload=PendingImage(data=data, filename="broken.jpg", content_type="image/jpeg"),
        )

        assert get_storage().read(vehicle.images[0]) == data


class TestMediaRegistry:
    """Registry rows keyed by path."""

    def test_register_is_idempotent_per_path(self, site):
        first = registry.register(site_id=site.id, path="autobazar/cars/1/main.jpg", alt="front")
        second = registry.register(site_id=site.id, path="autobazar/cars/1/main.jpg", alt="new front")
        db.session.commit()

        assert first == second
        assert registry.find_by_path("autobazar/cars/1/main.jpg").alt == "new front"

    def test_find_by_path_is_site_scoped(self, site, other_site):
        registry.register(site_id=other_site.id, path="divadlo/program/x/1/main.jpg")
        db.session.commit()

        assert registry.find_by_path("divadlo/program/x/1/main.jpg", site_id=site.id) is None

    def test_delete_by_prefix_only_touches_that_folder(self, site):
        for path in (
            "autobazar/cars/12/main.jpg",
            "autobazar/cars/12/gallery-a.jpg",
            "autobazar/cars/123/main.jpg",
        ):
            registry.register(site_id=site.id, path=path)
        db.session.commit()

        removed = registry.delete_by_prefix(site_id=site.id, prefix="autobazar/cars/12")
        db.session.commit()

        assert removed == 2
        assert [a.path for a in MediaAsset.query.all()] == ["autobazar/cars/123/main.jpg"]

    def test_delete_by_prefix_is_site_scoped(self, site, other_site):
        registry.register(site_id=other_site.id, path="shared/cars/1/main.jpg")
        db.session.commit()

        assert registry.delete_by_prefix(site_id=site.id, prefix="shared/cars/1") == 0
