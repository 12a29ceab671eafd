"""Image-related helpers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from PIL import Image
from pillow_heif import register_heif_opener

# Teach Pillow to open .heic/.heif through libheif.
register_heif_opener()


@dataclass(frozen=True)
class DecodedImage:
    """Interleaved 8-bit pixels, row-major, no padding between rows."""

    pixels: bytes
    width: int
    height: int
    mode: str = "RGB"

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


def decode_heif_file(path: Path) -> DecodedImage:
    """Decode the primary image of a HEIF container to interleaved RGB."""

    # Only libheif may claim the file; a JPEG or WebP must not decode.
    with Image.open(path, formats=["HEIF"]) as im:
        im.load()
        rgb = im if im.mode == "RGB" else im.convert("RGB")
        w, h = rgb.size
        return DecodedImage(pixels=rgb.tobytes(), width=w, height=h)


def to_pil_image(image: DecodedImage) -> Image.Image:
    return Image.frombytes(image.mode, image.size, image.pixels)


def write_ppm_file(image: DecodedImage, ppm_path: Path) -> None:
    """Write an RGB image as a binary PPM (P6) file."""

    if image.mode != "RGB":
        raise ValueError(f"PPM output needs RGB pixels, got {image.mode}")
    header = f"P6\n{image.width} {image.height}\n255\n".encode("ascii")
    ppm_path.write_bytes(header + image.pixels)
