"""QR code rendering for pet public links."""

import base64
import io
import logging

import qrcode
from qrcode.constants import ERROR_CORRECT_H
from qrcode.exceptions import DataOverflowError

from app.core.exceptions import QRCodeGenerationError
from app.infrastructure.cache import TimedCache

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 7 * 24 * 60 * 60
CACHE_MAX_ENTRIES = 500
# Byte-mode capacity of a version 40 symbol
QR_MAX_CAPACITY = 2953
TARGET_WIDTH_PX = 300


class QRCodeService:
    """Renders PNG data URLs, cached per (uniqueId, base URL)."""

    def __init__(self):
        self.cache = TimedCache(CACHE_TTL_SECONDS, CACHE_MAX_ENTRIES)
        self.default_options = {
            "error_correction": ERROR_CORRECT_H,
            "border": 1,
            "fill_color": "#000000",
            "back_color": "#ffffff",
        }

    @staticmethod
    def pet_url(unique_id: str, base_url: str) -> str:
        return f"{base_url.rstrip('/')}/{unique_id}"

    def generate_qr_code(self, unique_id: str, base_url: str, **options) -> str:
        """Data URL of the QR pointing at the pet's public link."""
        cache_key = f"{unique_id}_{base_url}"
        cached = self.cache.get(cache_key)
        if cached:
            return cached

        try:
            data_url = self.generate_custom_qr_code(self.pet_url(unique_id, base_url), **options)
        except QRCodeGenerationError:
            logger.error(f"Error generating QR code for pet {unique_id}")
            raise

        self.cache.set(cache_key, data_url)
        return data_url

    def generate_custom_qr_code(self, data: str, **options) -> str:
        png = self.generate_qr_code_bytes(data, **options)
        return "data:image/png;base64," + base64.b64encode(png).decode("ascii")

    def generate_qr_code_bytes(self, data: str, **options) -> bytes:
        if not self.validate_qr_data(data):
            raise QRCodeGenerationError()

        opts = {**self.default_options, **options}
        try:
            qr = qrcode.QRCode(
                error_correction=opts["error_correction"],
                border=opts["border"],
                box_size=1,
            )
            qr.add_data(data)
            qr.make(fit=True)
            # Pick the box size that gets closest to the target width
            modules = qr.modules_count + 2 * opts["border"]
            qr.box_size = max(1, round(TARGET_WIDTH_PX / modules))
            image = qr.make_image(fill_color=opts["fill_color"], back_color=opts["back_color"])
            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
        except (ValueError, OSError, DataOverflowError) as e:
            logger.error(f"QR rendering failed: {e}")
            raise QRCodeGenerationError() from e
        return buffer.getvalue()

    @staticmethod
    def validate_qr_data(data) -> bool:
        return isinstance(data, str) and 0 < len(data) <= QR_MAX_CAPACITY

    def clear_cache(self) -> None:
        self.cache.clear()

    def get_cache_stats(self) -> dict:
        return self.cache.stats()


qr_code_service = QRCodeService()
