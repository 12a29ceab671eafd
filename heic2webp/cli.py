"""Command line interface for heic2webp."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from .config import DEFAULT_ENCODER, DEFAULT_METHOD, DEFAULT_QUALITY, SOURCE_EXTENSIONS, ConversionOptions, load_config
from .encoders import encoder_names
from .pipeline import run_batch
from .report import write_manifest

log = logging.getLogger(__name__)

_EPILOG = """\
examples:
  heic2webp photo.heic
  heic2webp photos/ -r -v
  heic2webp photos/ -o converted/ -q 90
"""


class _ArgumentParser(argparse.ArgumentParser):
    """Usage errors exit with status 1 like every other failure."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _build_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(
        prog="heic2webp",
        description="Convert HEIC/HEIF images (a single file or a directory of them) to WebP.",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    p.add_argument("input", nargs="?", type=Path, help="HEIC file or directory containing HEIC files")

    # Unset flags stay None so config-file values can fill them in.
    p.add_argument("-o", "--output", default=None, help="Output directory (default: next to each input)")
    p.add_argument("-q", "--quality", type=int, default=None, help=f"WebP quality 1-100 (default: {DEFAULT_QUALITY})")
    p.add_argument("-r", "--recursive", action="store_true", default=None, help="Process directories recursively")
    p.add_argument("-v", "--verbose", action="store_true", help="Show detailed progress")
    p.add_argument(
        "-m", "--method", type=int, default=None, help=f"WebP effort 0 (fast) - 6 (small) (default: {DEFAULT_METHOD})"
    )
    p.add_argument("-j", "--jobs", type=int, default=None, help="Parallel worker threads (0=auto, default: 1)")
    p.add_argument(
        "--encoder",
        default=None,
        help=f"WebP encoder: {', '.join(encoder_names())} (default: {DEFAULT_ENCODER})",
    )
    p.add_argument(
        "--mirror-subdirs",
        action="store_true",
        default=None,
        help="With --output, recreate input subdirectories under the output directory",
    )
    p.add_argument("--manifest", type=Path, default=None, help="Write a JSONL record per file to this path")
    p.add_argument("--config", type=Path, default=None, help="Optional JSON/YAML file with default options")
    return p


def _pick(*values: Any) -> Any:
    for v in values:
        if v is not None:
            return v
    return None


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = _build_parser()
    ns = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    if ns.input is None:
        parser.print_help(sys.stderr)
        return 1

    try:
        config = load_config(ns.config)
        options = ConversionOptions(
            quality=_pick(ns.quality, config.quality, DEFAULT_QUALITY),
            output_dir=ns.output,
            recursive=bool(_pick(ns.recursive, config.recursive, False)),
            verbose=bool(ns.verbose),
            method=_pick(ns.method, config.method, DEFAULT_METHOD),
            jobs=_pick(ns.jobs, config.jobs, 1),
            encoder=_pick(ns.encoder, config.encoder, DEFAULT_ENCODER),
            mirror_subdirs=bool(_pick(ns.mirror_subdirs, config.mirror_subdirs, False)),
            source_extensions=_pick(config.extensions, SOURCE_EXTENSIONS),
        )
        summary = run_batch(ns.input, options)
        if ns.manifest is not None:
            log.info("Manifest: %s", write_manifest(summary, ns.manifest))
    except Exception as e:
        log.error(str(e))
        return 1

    return 0 if summary.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
