"""File discovery, output path resolution and atomic writes."""

from __future__ import annotations

import os
import secrets
from pathlib import Path
from typing import Iterable

from ..config import SOURCE_EXTENSIONS, TARGET_EXTENSION
from ..errors import NotFoundError


def is_source_file(path: Path, extensions: Iterable[str] = SOURCE_EXTENSIONS) -> bool:
    """True if path is a regular file with a source extension (case-insensitive)."""

    # is_file() follows a symlink once and is False for dangling links.
    if not path.is_file():
        return False
    return path.suffix.lower() in extensions


def discover_source_files(
    root: Path, recursive: bool, extensions: Iterable[str] = SOURCE_EXTENSIONS
) -> list[Path]:
    """Return source files under root.

    root may be a single file. The returned list is sorted by path relative to
    root to stabilize processing order.
    """

    extensions = frozenset(extensions)
    root = Path(root).absolute()
    if not root.exists():
        raise NotFoundError(f"input not found: {root}")

    if not root.is_dir():
        return [root] if is_source_file(root, extensions) else []

    candidates: list[Path] = []
    if recursive:
        # os.walk does not descend into symlinked directories, so link cycles are never entered.
        for dirpath, _dirnames, filenames in os.walk(root, followlinks=False):
            candidates.extend(Path(dirpath) / name for name in filenames)
    else:
        candidates.extend(root.iterdir())

    files = [p for p in candidates if is_source_file(p, extensions)]
    files.sort(key=lambda p: p.relative_to(root).as_posix())
    return files


def resolve_output_path(
    source: Path, output_dir: Path | None = None, *, source_root: Path | None = None
) -> Path:
    """Compute the WebP path for a source file.

    - Without output_dir, the WebP lands next to its source.
    - With output_dir and source_root, the source's sub-directory relative to
      source_root is preserved under output_dir.
    - Only the final suffix is replaced: a.b.heic -> a.b.webp.
    """

    name = source.stem + TARGET_EXTENSION
    if not output_dir:
        return source.parent / name
    output_dir = Path(output_dir)
    if source_root is not None:
        return output_dir / source.parent.relative_to(source_root) / name
    return output_dir / name


def ensure_parent_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def write_bytes_atomic(path: Path, data: bytes) -> None:
    """Write data to path via a temp file in the same directory plus os.replace.

    On failure the temp file is removed and an existing file at path is left as it was.
    """

    tmp = path.with_name(f".{path.name}.{secrets.token_hex(4)}.tmp")
    # 0o666 so the process umask applies, as for any newly created file.
    fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o666)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    try:
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
