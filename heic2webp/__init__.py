"""heic2webp

A CLI tool to batch-convert HEIC/HEIF photos into WebP.

Primary entrypoints:
- python -m heic2webp
- console script: heic2webp
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
