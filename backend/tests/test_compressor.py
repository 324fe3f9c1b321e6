"""
Tests for the image compressor.
"""

import io

import pytest
from PIL import Image

from sitecms.domain.exceptions import DecodeError
from sitecms.media.compressor import (
    QUALITY_FLOOR,
    ImageFile,
    _encode,
    compress,
    compress_many,
    compress_or_original,
    fit_within,
)


def _open(data):
    return Image.open(io.BytesIO(data))


class TestFitWithin:
    """Dimension scaling."""

    def test_scales_down_preserving_aspect_ratio(self):
        assert fit_within(3840, 2160, 1920, 1080) == (1920, 1080)
        assert fit_within(4000, 1000, 1920, 1080) == (1920, 480)

    def test_never_scales_up(self):
        assert fit_within(800, 600, 1920, 1080) == (800, 600)


class TestCompress:
    """Budget-driven re-encoding."""

    def test_small_file_returned_unchanged(self, image_bytes):
        original = ImageFile(data=image_bytes(32, 32), filename="logo.png", content_type="image/png")

        assert compress(original, max_size_bytes=500 * 1024) is original

    def test_non_image_returned_unchanged(self):
        original = ImageFile(data=b"%PDF" * 10_000, filename="brochure.pdf", content_type="application/pdf")

        assert compress(original, max_size_bytes=1024) is original

    def test_large_image_resized_and_converted_to_jpeg(self, image_bytes):
        original = ImageFile(
            data=image_bytes(2400, 1600, fmt="PNG", noise=True),
            filename="photo.png",
            content_type="image/png",
        )

        result = compress(original, max_size_bytes=200 * 1024, max_width=1200, max_height=800)

        assert result.filename == "photo.jpg"
        assert result.content_type == "image/jpeg"
        img = _open(result.data)
        assert img.format == "JPEG"
        assert img.size == (1200, 800)

    def test_stops_at_first_quality_within_budget(self, image_bytes):
        original = ImageFile(data=image_bytes(1600, 1000, fmt="BMP"), filename="flat.bmp", content_type="image/bmp")

        result = compress(original, max_size_bytes=500 * 1024)

        assert result.size <= 500 * 1024
        # A flat image fits at the starting quality already.
        assert result.data == _encode(_open(original.data).convert("RGB"), 90)

    def test_quality_floor_terminates(self, image_bytes):
        original = ImageFile(
            data=image_bytes(640, 480, fmt="PNG", noise=True),
            filename="noise.png",
            content_type="image/png",
        )

        # Unreachable budget: the floor encoding comes back regardless of size.
        result = compress(original, max_size_bytes=1024, max_width=640, max_height=480)

        expected = _encode(_open(original.data).convert("RGB"), QUALITY_FLOOR)
        assert result.data == expected
        assert result.size > 1024

    def test_alpha_flattened(self):
        img = Image.new("RGBA", (1200, 900), (0, 0, 255, 0))
        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        original = ImageFile(data=buffer.getvalue(), filename="transparent.png", content_type="image/png")

        result = compress(original, max_size_bytes=100)

        decoded = _open(result.data)
        assert decoded.mode == "RGB"
        r, g, b = decoded.getpixel((10, 10))
        assert min(r, g, b) > 240

    def test_corrupt_image_raises_decode_error(self):
        broken = ImageFile(data=b"not really a jpeg" * 1000, filename="broken.jpg", content_type="image/jpeg")

        with pytest.raises(DecodeError):
            compress(broken, max_size_bytes=1024)


class TestCompressBatch:
    """Failures are per file."""

    def test_failure_keeps_original(self):
        broken = ImageFile(data=b"garbage" * 1000, filename="broken.jpg", content_type="image/jpeg")

        assert compress_or_original(broken, max_size_bytes=1024) is broken

    def test_batch_continues_after_failure(self, image_bytes):
        broken = ImageFile(data=b"garbage" * 1000, filename="broken.jpg", content_type="image/jpeg")
        good = ImageFile(
            data=image_bytes(800, 600, fmt="PNG", noise=True),
            filename="good.png",
            content_type="image/png",
        )

        results = compress_many([broken, good], max_size_bytes=50 * 1024)

        assert results[0] is broken
        assert results[1].filename == "good.jpg"
