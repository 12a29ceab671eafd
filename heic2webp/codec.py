"""Decode/encode capability used by the conversion worker.

The worker only needs two calls, so anything with matching ``decode`` and
``encode`` methods can stand in for CodecAdapter (tests use an in-memory fake).
Both calls are single-shot: a failure is final for that file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from .config import DEFAULT_METHOD
from .encoders import get_encoder
from .encoders.base import WebPEncoder
from .errors import DecodeError, EncodeError
from .utils.image import DecodedImage, decode_heif_file


class Codec(Protocol):
    def decode(self, path: Path) -> DecodedImage: ...

    def encode(self, image: DecodedImage, quality: int, method: int = DEFAULT_METHOD) -> bytes: ...


class CodecAdapter:
    """HEIF decoding through pillow-heif, WebP encoding through an encoder plugin."""

    def __init__(self, encoder: WebPEncoder) -> None:
        self.encoder = encoder

    def decode(self, path: Path) -> DecodedImage:
        try:
            return decode_heif_file(path)
        except Exception as e:
            raise DecodeError(f"failed to read HEIF: {e}") from e

    def encode(self, image: DecodedImage, quality: int, method: int = DEFAULT_METHOD) -> bytes:
        try:
            data = self.encoder.encode(image, quality, method)
        except Exception as e:
            raise EncodeError(f"{self.encoder.name} failed to encode WebP: {e}") from e
        if not data:
            raise EncodeError(f"{self.encoder.name} produced no WebP output")
        return data


def make_codec(encoder_name: str) -> CodecAdapter:
    return CodecAdapter(get_encoder(encoder_name))
