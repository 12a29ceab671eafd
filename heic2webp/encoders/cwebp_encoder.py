"""libwebp `cwebp` encoder plugin.

`cwebp` cannot read raw pixels from memory, so the decoded image is written
to a temporary PPM (P6) and the WebP is read back from a temporary output.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

from ..utils.image import DecodedImage, write_ppm_file
from ..utils.subprocess import run
from . import register_encoder
from .base import WebPEncoder

log = logging.getLogger(__name__)


@register_encoder
class CwebpEncoder(WebPEncoder):
    name = "cwebp"

    def __init__(self) -> None:
        self._exe = shutil.which("cwebp")

    def is_available(self) -> bool:
        return self._exe is not None

    def build_cmd(self, input_ppm: Path, output_webp: Path, quality: int, method: int) -> list[str]:
        exe = self._exe or "cwebp"
        return [exe, "-quiet", "-q", str(int(quality)), "-m", str(int(method)), str(input_ppm), "-o", str(output_webp)]

    def encode(self, image: DecodedImage, quality: int, method: int) -> bytes:
        if self._exe is None:
            raise RuntimeError("cwebp executable not found on PATH")

        with tempfile.TemporaryDirectory(prefix="heic2webp-") as tmp:
            ppm = Path(tmp) / "input.ppm"
            out = Path(tmp) / "output.webp"
            write_ppm_file(image, ppm)
            cmd = self.build_cmd(ppm, out, quality, method)
            log.debug("Running: %s", " ".join(cmd))
            run(cmd)
            return out.read_bytes() if out.exists() else b""
