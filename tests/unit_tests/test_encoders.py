"""Unit tests for the encoder registry, encoder plugins and the codec adapter."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from heic2webp.codec import CodecAdapter, make_codec
from heic2webp.encoders import available_encoders, encoder_names, get_encoder, register_encoder
from heic2webp.encoders import cwebp_encoder
from heic2webp.encoders.base import WebPEncoder
from heic2webp.errors import ConfigError, DecodeError, EncodeError
from heic2webp.utils.image import DecodedImage, write_ppm_file
from heic2webp.utils.subprocess import CommandError, run

RED_2x1 = DecodedImage(pixels=bytes([255, 0, 0, 255, 0, 0]), width=2, height=1)


class _StubEncoder(WebPEncoder):
    name = "stub"

    def __init__(self, output: bytes = b"RIFFdata", error: Exception | None = None) -> None:
        self.output = output
        self.error = error

    def is_available(self) -> bool:
        return True

    def encode(self, image: DecodedImage, quality: int, method: int) -> bytes:
        if self.error is not None:
            raise self.error
        return self.output


def test_builtin_encoders_are_registered() -> None:
    assert {"pillow", "cwebp"} <= set(encoder_names())
    assert set(available_encoders()) <= set(encoder_names())


def test_unknown_encoder_is_config_error() -> None:
    with pytest.raises(ConfigError, match="unknown encoder"):
        get_encoder("nope")


def test_unavailable_encoder_is_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cwebp_encoder.shutil, "which", lambda name: None)
    with pytest.raises(ConfigError, match="not available"):
        make_codec("cwebp")


def test_duplicate_registration_is_rejected() -> None:
    class Dup(_StubEncoder):
        name = "pillow"

    with pytest.raises(ValueError, match="Duplicate"):
        register_encoder(Dup)


def test_cwebp_command_line(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cwebp_encoder.shutil, "which", lambda name: "/usr/bin/cwebp")
    enc = cwebp_encoder.CwebpEncoder()
    assert enc.is_available()
    assert enc.build_cmd(Path("in.ppm"), Path("out.webp"), 85, 4) == [
        "/usr/bin/cwebp", "-quiet", "-q", "85", "-m", "4", "in.ppm", "-o", "out.webp",
    ]


def test_pillow_encoder_produces_webp() -> None:
    try:
        enc = get_encoder("pillow")
    except ConfigError:
        pytest.skip("Pillow built without WebP support")
    data = enc.encode(RED_2x1, quality=80, method=4)
    assert data[:4] == b"RIFF" and data[8:12] == b"WEBP"


def test_adapter_encode_maps_errors() -> None:
    with pytest.raises(EncodeError, match="stub failed"):
        CodecAdapter(_StubEncoder(error=RuntimeError("boom"))).encode(RED_2x1, 85)
    with pytest.raises(EncodeError, match="no WebP output"):
        CodecAdapter(_StubEncoder(output=b"")).encode(RED_2x1, 85)
    assert CodecAdapter(_StubEncoder()).encode(RED_2x1, 85) == b"RIFFdata"


def test_adapter_decode_maps_errors(tmp_path: Path) -> None:
    adapter = CodecAdapter(_StubEncoder())
    junk = tmp_path / "junk.heic"
    junk.write_bytes(b"definitely not an image")
    with pytest.raises(DecodeError):
        adapter.decode(junk)
    with pytest.raises(DecodeError):
        adapter.decode(tmp_path / "missing.heic")


def test_write_ppm_file(tmp_path: Path) -> None:
    path = tmp_path / "x.ppm"
    write_ppm_file(RED_2x1, path)
    assert path.read_bytes() == b"P6\n2 1\n255\n" + RED_2x1.pixels
    with pytest.raises(ValueError):
        write_ppm_file(DecodedImage(pixels=b"\x00", width=1, height=1, mode="L"), path)


def test_run_reports_non_zero_exit() -> None:
    with pytest.raises(CommandError) as exc_info:
        run([sys.executable, "-c", "import sys; sys.stderr.write('bad input'); sys.exit(3)"])
    assert "exited with code 3" in str(exc_info.value)
    assert "bad input" in str(exc_info.value)
    assert exc_info.value.result is not None and exc_info.value.result.returncode == 3


def test_run_reports_missing_executable(tmp_path: Path) -> None:
    with pytest.raises(CommandError, match="Could not run"):
        run([str(tmp_path / "no-such-binary")])
