"""Shared pytest configuration, marker assignment and a fake codec."""

from __future__ import annotations

from pathlib import Path

import pytest

from heic2webp.errors import DecodeError, EncodeError
from heic2webp.utils.image import DecodedImage


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        parts = set(Path(str(item.fspath)).parts)
        if "integration_tests" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


class FakeCodec:
    """In-memory codec driven by file contents.

    - contents starting with b"BAD" fail to decode
    - contents containing b"NOENC" fail to encode
    - contents containing b"EMPTY" encode to zero bytes
    The "WebP" payload is b"RIFF" + quality byte + method byte + the pixels.
    """

    def decode(self, path: Path) -> DecodedImage:
        data = path.read_bytes()
        if data.startswith(b"BAD"):
            raise DecodeError(f"corrupt HEIF: {path.name}")
        return DecodedImage(pixels=data, width=4, height=2)

    def encode(self, image: DecodedImage, quality: int, method: int = 4) -> bytes:
        if b"NOENC" in image.pixels:
            raise EncodeError("encoder exploded")
        if b"EMPTY" in image.pixels:
            return b""
        return b"RIFF" + bytes([quality, method]) + image.pixels


@pytest.fixture
def fake_codec() -> FakeCodec:
    return FakeCodec()


@pytest.fixture
def write_file():
    """Create a file (and its parents) under tmp_path-style roots."""

    def _write(path: Path, data: bytes = b"heic-pixels") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    return _write
