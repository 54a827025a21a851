"""QR code rendering."""

import asyncio
import io
import logging
from abc import ABC, abstractmethod
from typing import Optional

import qrcode
from PIL import Image

from .errors import EncodeFailure
from .models import CodeImage, CodeOptions


class CodeEncoderBase(ABC):
    """Renders text into a scannable code image."""

    @abstractmethod
    async def render(self, text: str, options: CodeOptions) -> CodeImage:
        """Render text with the given visual options.

        Raises:
            EncodeFailure: If rendering fails
        """
        pass


class QRCodeEncoder(CodeEncoderBase):
    """QR encoder backed by ``qrcode`` and Pillow."""

    def __init__(
        self,
        error_correction: int = qrcode.constants.ERROR_CORRECT_M,
        logger: Optional[logging.Logger] = None,
    ):
        self.error_correction = error_correction
        self.logger = logger or logging.getLogger(__name__)

    async def render(self, text: str, options: CodeOptions) -> CodeImage:
        # Rendering is CPU-bound; keep it off the event loop.
        try:
            png = await asyncio.to_thread(self._render_png, text, options)
        except EncodeFailure:
            raise
        except Exception as e:
            self.logger.error(f"QR rendering failed: {e}")
            raise EncodeFailure(f"Failed to render QR code: {e}") from e

        return CodeImage(png=png, width=options.pixel_size, text=text)

    def _render_png(self, text: str, options: CodeOptions) -> bytes:
        if not text:
            raise EncodeFailure("Nothing to encode")

        qr = qrcode.QRCode(
            version=None,
            error_correction=self.error_correction,
            box_size=10,
            border=options.margin,
        )
        qr.add_data(text)
        qr.make(fit=True)

        img = qr.make_image(
            fill_color=options.foreground,
            back_color=options.background,
        ).convert("RGB")

        # Scale to the requested width; NEAREST keeps module edges crisp.
        img = img.resize((options.pixel_size, options.pixel_size), resample=Image.Resampling.NEAREST)

        out = io.BytesIO()
        img.save(out, format="PNG")
        return out.getvalue()
