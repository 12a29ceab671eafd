"""Conversion options and optional config-file defaults.

This module defines:
- The recognized source extensions and the target extension.
- ConversionOptions, the immutable per-run configuration threaded through the
  batch runner into every worker.
- Optional JSON/YAML config files that supply defaults for the CLI.

Precedence is: command line flag > config file > built-in default.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigError

SOURCE_EXTENSIONS: frozenset[str] = frozenset({".heic", ".heif"})
TARGET_EXTENSION = ".webp"

DEFAULT_QUALITY = 85
# libwebp effort/speed trade-off; 4 is cwebp's own default.
DEFAULT_METHOD = 4
DEFAULT_ENCODER = "pillow"


def _check_int(name: str, value: Any, lo: int, hi: int | None) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if value < lo or (hi is not None and value > hi):
        bounds = f"between {lo} and {hi}" if hi is not None else f">= {lo}"
        raise ConfigError(f"{name} must be {bounds}, got {value}")


def normalize_extensions(exts: Any) -> frozenset[str]:
    """Lower-case extensions and make sure each has a leading dot."""

    if isinstance(exts, str) or not exts:
        raise ConfigError("extensions must be a non-empty list of strings")
    out: set[str] = set()
    for e in exts:
        if not isinstance(e, str) or not e.strip(". "):
            raise ConfigError(f"invalid extension: {e!r}")
        e = e.strip().lower()
        out.add(e if e.startswith(".") else f".{e}")
    return frozenset(out)


@dataclass(frozen=True)
class ConversionOptions:
    """Options for one batch run. Validated on construction, read-only after."""

    quality: int = DEFAULT_QUALITY
    output_dir: Path | None = None  # None => alongside each source
    recursive: bool = False
    verbose: bool = False
    method: int = DEFAULT_METHOD
    jobs: int = 1  # 0 => one worker per CPU
    encoder: str = DEFAULT_ENCODER
    mirror_subdirs: bool = False
    source_extensions: frozenset[str] = field(default_factory=lambda: SOURCE_EXTENSIONS)

    def __post_init__(self) -> None:
        _check_int("quality", self.quality, 1, 100)
        _check_int("method", self.method, 0, 6)
        _check_int("jobs", self.jobs, 0, None)
        if not isinstance(self.encoder, str) or not self.encoder:
            raise ConfigError("encoder must be a non-empty string")

        # Frozen dataclass: normalize through object.__setattr__.
        out = self.output_dir
        if out is not None and not isinstance(out, Path):
            out = Path(out) if str(out) else None
        object.__setattr__(self, "output_dir", out)
        object.__setattr__(self, "source_extensions", normalize_extensions(self.source_extensions))


@dataclass(frozen=True)
class AppConfig:
    """Defaults read from a config file. None means "not set in the file"."""

    quality: int | None = None
    method: int | None = None
    jobs: int | None = None
    encoder: str | None = None
    recursive: bool | None = None
    mirror_subdirs: bool | None = None
    extensions: frozenset[str] | None = None


_INT_KEYS = ("quality", "method", "jobs")
_BOOL_KEYS = ("recursive", "mirror_subdirs")


def load_config(path: Path | None) -> AppConfig:
    """Load optional config defaults.

    Supports JSON by default.
    YAML is supported if PyYAML is installed and the file extension is .yml/.yaml.

    Schema (all keys optional):
    {
      "quality": 85,
      "method": 4,
      "jobs": 0,
      "encoder": "pillow",
      "recursive": false,
      "mirror_subdirs": false,
      "extensions": [".heic", ".heif"]
    }
    """

    if path is None:
        return AppConfig()

    path = path.expanduser().resolve()
    if not path.exists() or not path.is_file():
        raise ConfigError(f"config file not found: {path}")

    raw: Any
    try:
        if path.suffix.lower() in {".yml", ".yaml"}:
            try:
                import yaml  # type: ignore
            except ImportError as e:  # pragma: no cover
                raise ConfigError(
                    "YAML config requested but PyYAML is not installed. Install with: pip install pyyaml"
                ) from e
            with path.open("r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        else:
            with path.open("r", encoding="utf-8") as f:
                raw = json.load(f) or {}
    except ConfigError:
        raise
    except Exception as e:
        raise ConfigError(f"could not parse config file {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"config file must contain a mapping: {path}")

    values: dict[str, Any] = {}
    for k in _INT_KEYS:
        if k in raw:
            try:
                values[k] = int(raw[k])
            except (TypeError, ValueError) as e:
                raise ConfigError(f"{k} must be an integer, got {raw[k]!r}") from e
    for k in _BOOL_KEYS:
        if k in raw:
            if not isinstance(raw[k], bool):
                raise ConfigError(f"{k} must be true or false, got {raw[k]!r}")
            values[k] = raw[k]
    if "encoder" in raw:
        values["encoder"] = str(raw["encoder"])
    if "extensions" in raw:
        values["extensions"] = normalize_extensions(raw["extensions"])

    unknown = sorted(set(raw) - set(_INT_KEYS) - set(_BOOL_KEYS) - {"encoder", "extensions"})
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(unknown)}")

    return AppConfig(**values)
