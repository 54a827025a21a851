"""Tests for QR code rendering."""

import io

import pytest
from PIL import Image

from qrlink.encoder import QRCodeEncoder
from qrlink.errors import EncodeFailure
from qrlink.models import CodeImage, CodeOptions
from qrlink.preview_cache import PreviewCache


@pytest.mark.asyncio
class TestQRCodeEncoder:
    """Test the qrcode/Pillow encoder."""

    async def test_render_png(self):
        image = await QRCodeEncoder().render("https://qr.example.org/q?url=a.com", CodeOptions())

        assert image.png.startswith(b"\x89PNG")
        assert image.width == 300
        assert image.text == "https://qr.example.org/q?url=a.com"

        with Image.open(io.BytesIO(image.png)) as img:
            assert img.size == (300, 300)
            assert img.getpixel((0, 0)) == (255, 255, 255)

    async def test_render_options(self):
        options = CodeOptions(pixel_size=200, margin=1, foreground="#000000", background="#FF0000")

        image = await QRCodeEncoder().render("hello", options)

        with Image.open(io.BytesIO(image.png)) as img:
            assert img.size == (200, 200)
            assert img.getpixel((0, 0)) == (255, 0, 0)

    async def test_data_url(self):
        image = await QRCodeEncoder().render("hello", CodeOptions(pixel_size=50))

        assert image.data_url.startswith("data:image/png;base64,iVBOR")

    async def test_empty_text(self):
        with pytest.raises(EncodeFailure):
            await QRCodeEncoder().render("", CodeOptions())

    async def test_data_too_long(self):
        with pytest.raises(EncodeFailure):
            await QRCodeEncoder().render("x" * 10000, CodeOptions())


class TestPreviewCache:
    """Test preview cache entries."""

    PAYLOAD = "https://qr.example.org/q?url=https%3A%2F%2Fa.com"

    def image(self, text):
        return CodeImage(png=b"\x89PNG", width=200, text=text)

    def test_put_and_get(self):
        cache = PreviewCache()
        image = self.image(self.PAYLOAD)

        cache.put("1", image)

        assert cache.get("1", self.PAYLOAD) is image
        assert "1" in cache
        assert len(cache) == 1

    def test_changed_destination_is_miss(self):
        cache = PreviewCache()
        cache.put("1", self.image(self.PAYLOAD))

        assert cache.get("1", "https://qr.example.org/q?url=https%3A%2F%2Fb.com") is None
        assert "1" not in cache

    def test_other_origin_is_miss(self):
        cache = PreviewCache()
        cache.put("1", self.image("https://evil.example/q?url=https%3A%2F%2Fa.com"))

        assert cache.get("1", self.PAYLOAD) is None

    def test_invalidate(self):
        cache = PreviewCache()
        cache.put("1", self.image(self.PAYLOAD))

        assert cache.invalidate("1")
        assert not cache.invalidate("1")
        assert cache.get("1", self.PAYLOAD) is None
