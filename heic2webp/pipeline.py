"""Conversion pipeline (file discovery, per-file conversion, aggregation)."""

from __future__ import annotations

import logging
import os
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from .codec import Codec, make_codec
from .config import ConversionOptions
from .errors import ConfigError, DecodeError, EncodeError, NotFoundError, WriteError
from .report import report_result, report_summary
from .results import BatchSummary, ConversionResult, Failure, Success
from .utils.files import discover_source_files, ensure_parent_dir, resolve_output_path, write_bytes_atomic

log = logging.getLogger(__name__)


def _effective_jobs(requested: int) -> int:
    if requested and requested > 0:
        return requested
    # Decode/encode release the GIL => threads scale decently
    return max(1, (os.cpu_count() or 4))


def _failure(source: Path, destination: Path, kind: str, exc: BaseException) -> ConversionResult:
    reason = str(exc) or exc.__class__.__name__
    return ConversionResult(source=source, destination=destination, outcome=Failure(kind=kind, reason=reason))


def _same_file(source: Path, destination: Path) -> bool:
    if destination.absolute() == source.absolute():
        return True
    return destination.exists() and os.path.samefile(source, destination)


def convert_file(source: Path, destination: Path, options: ConversionOptions, codec: Codec) -> ConversionResult:
    """Convert one file: decode, encode, write.

    Never raises. The first failing step is recorded in the returned result and
    nothing after it runs.
    """

    log.debug("Decoding: %s", source)
    try:
        input_bytes = source.stat().st_size
        image = codec.decode(source)
    except Exception as e:
        return _failure(source, destination, DecodeError.kind, e)

    log.debug("Encoding WebP: %s (%dx%d)", destination, image.width, image.height)
    try:
        data = codec.encode(image, options.quality, options.method)
        if not data:
            raise EncodeError("encoder produced no output")
    except Exception as e:
        return _failure(source, destination, EncodeError.kind, e)

    try:
        if _same_file(source, destination):
            raise WriteError("destination is the source file")
        write_bytes_atomic(destination, data)
    except Exception as e:
        return _failure(source, destination, WriteError.kind, e)

    return ConversionResult(
        source=source,
        destination=destination,
        outcome=Success(input_bytes=input_bytes, output_bytes=len(data), width=image.width, height=image.height),
    )


def _warn_collisions(plan: list[tuple[Path, Path]]) -> None:
    counts = Counter(dst for _, dst in plan)
    for dst, n in sorted(counts.items()):
        if n > 1:
            log.warning("%d source files map to %s; the last one converted wins", n, dst)


def run_batch(root: Path | str, options: ConversionOptions, codec: Codec | None = None) -> BatchSummary:
    """Run the batch conversion.

    Raises NotFoundError/ConfigError before any file is touched. Per-file
    failures never raise; they are reported and collected in the summary.
    """

    root = Path(root).expanduser().absolute()
    if not root.exists():
        raise NotFoundError(f"input not found: {root}")

    if codec is None:
        codec = make_codec(options.encoder)

    # Must exist before any worker starts.
    if options.output_dir is not None:
        try:
            options.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"cannot create output directory {options.output_dir}: {e}") from e

    source_root: Path | None = None
    if root.is_dir():
        files = discover_source_files(root, options.recursive, options.source_extensions)
        if not files:
            log.info("No HEIC files found in %s", root)
            return BatchSummary()
        log.info("Found %d HEIC file(s)", len(files))
        if options.mirror_subdirs:
            source_root = root
    else:
        # An explicitly named file is always attempted; the decoder decides.
        files = [root]

    plan = [(src, resolve_output_path(src, options.output_dir, source_root=source_root)) for src in files]
    _warn_collisions(plan)
    if source_root is not None:
        try:
            for _, dst in plan:
                ensure_parent_dir(dst)
        except OSError as e:
            raise ConfigError(f"cannot create output directory: {e}") from e

    jobs = min(_effective_jobs(options.jobs), len(plan))
    log.debug("Quality: %d, method: %d, jobs: %d", options.quality, options.method, jobs)
    log.debug("Output: %s", options.output_dir or "alongside sources")

    results: list[ConversionResult | None] = [None] * len(plan)
    with ThreadPoolExecutor(max_workers=jobs) as ex:
        futs = {ex.submit(convert_file, src, dst, options, codec): i for i, (src, dst) in enumerate(plan)}

        # Report in completion order, store in discovery order.
        for fut in as_completed(futs):
            result = fut.result()
            report_result(result)
            results[futs[fut]] = result

    summary = BatchSummary(results=tuple(r for r in results if r is not None))
    report_summary(summary)
    return summary
