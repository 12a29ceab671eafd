"""Encoder registry.

Encoders register via the @register_encoder decorator.
Modules within heic2webp.encoders are auto-discovered on first lookup.

Thread-safety note: get_encoder returns a *new* instance per call, and the
batch runner shares one instance across worker threads, so plugins must keep
no per-image state on self.
"""

from __future__ import annotations

import importlib
import pkgutil

from ..errors import ConfigError
from .base import WebPEncoder

_REGISTRY: dict[str, type[WebPEncoder]] = {}


def register_encoder(cls: type[WebPEncoder]) -> type[WebPEncoder]:
    name = getattr(cls, "name", None)
    if not isinstance(name, str) or not name:
        raise ValueError("Encoder class must define a non-empty 'name' attribute")
    if name in _REGISTRY:
        raise ValueError(f"Duplicate encoder registration: {name}")
    _REGISTRY[name] = cls
    return cls


def _auto_import_plugins() -> None:
    # Import all modules in this package except base/__init__.
    pkg_name = __name__
    for m in pkgutil.iter_modules(__path__):  # type: ignore[name-defined]
        if m.ispkg:
            continue
        if m.name in {"base", "__init__"}:
            continue
        importlib.import_module(f"{pkg_name}.{m.name}")


def encoder_names() -> list[str]:
    """All registered encoder names, available or not."""

    _auto_import_plugins()
    return sorted(_REGISTRY)


def available_encoders() -> list[str]:
    _auto_import_plugins()
    return [name for name in sorted(_REGISTRY) if _REGISTRY[name]().is_available()]


def get_encoder(name: str) -> WebPEncoder:
    """Instantiate the named encoder, or raise ConfigError."""

    _auto_import_plugins()
    cls = _REGISTRY.get(name)
    if cls is None:
        raise ConfigError(f"unknown encoder {name!r}; choose from: {', '.join(sorted(_REGISTRY))}")
    enc = cls()
    if not enc.is_available():
        raise ConfigError(f"encoder {name!r} is not available on this system")
    return enc
