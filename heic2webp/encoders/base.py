"""Encoder interface."""

from __future__ import annotations

import abc

from ..utils.image import DecodedImage


class WebPEncoder(abc.ABC):
    """Abstract base class for WebP encoder plugins."""

    name: str

    @abc.abstractmethod
    def is_available(self) -> bool:
        """Return True if the backing library or executable is present."""

    @abc.abstractmethod
    def encode(self, image: DecodedImage, quality: int, method: int) -> bytes:
        """Encode pixels to a WebP bitstream.

        quality is 1..100, method is libwebp's effort level 0..6.
        """
