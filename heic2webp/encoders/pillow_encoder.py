"""Pillow WebP encoder plugin.

Uses the libwebp binding compiled into Pillow; no external executable needed.
"""

from __future__ import annotations

import io

from PIL import features

from ..utils.image import DecodedImage, to_pil_image
from . import register_encoder
from .base import WebPEncoder


@register_encoder
class PillowWebPEncoder(WebPEncoder):
    name = "pillow"

    def is_available(self) -> bool:
        return bool(features.check("webp"))

    def encode(self, image: DecodedImage, quality: int, method: int) -> bytes:
        buf = io.BytesIO()
        to_pil_image(image).save(buf, format="WEBP", quality=int(quality), method=int(method))
        return buf.getvalue()
