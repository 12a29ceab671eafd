"""Human-readable progress lines and the JSONL manifest."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .results import BatchSummary, ConversionResult, Failure, Success

log = logging.getLogger(__name__)


def format_bytes(n: int) -> str:
    if n < 1024:
        return f"{n} B"
    if n < 1024 * 1024:
        return f"{n / 1024:.1f} KB"
    return f"{n / (1024 * 1024):.1f} MB"


def report_result(result: ConversionResult) -> None:
    """Log one finished conversion. Details go to DEBUG (--verbose)."""

    src_name = result.source.name
    o = result.outcome
    if isinstance(o, Failure):
        log.error("Failed: %s: %s error: %s", src_name, o.kind, o.reason)
        return

    log.info("%s -> %s", src_name, result.destination.name)
    log.debug("   Dimensions: %dx%d", o.width, o.height)
    log.debug(
        "   Size: %s -> %s (%.1f%% smaller)",
        format_bytes(o.input_bytes),
        format_bytes(o.output_bytes),
        (result.compression_ratio or 0.0) * 100.0,
    )


def report_summary(summary: BatchSummary) -> None:
    log.info("Converted: %d/%d files", summary.succeeded, summary.total)
    if summary.failed:
        log.warning("%d file(s) failed", summary.failed)


def manifest_record(result: ConversionResult) -> dict[str, Any]:
    rec: dict[str, Any] = {
        "input": str(result.source),
        "output": str(result.destination),
        "ok": result.ok,
    }
    o = result.outcome
    if isinstance(o, Success):
        rec.update(
            input_bytes=o.input_bytes,
            output_bytes=o.output_bytes,
            width=o.width,
            height=o.height,
            compression_ratio=round(result.compression_ratio or 0.0, 4),
        )
    else:
        rec.update(error_kind=o.kind, error=o.reason)
    return rec


def write_manifest(summary: BatchSummary, path: Path) -> Path:
    """Write one JSON object per result, in batch order."""

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fp:
        for r in summary.results:
            fp.write(json.dumps(manifest_record(r), ensure_ascii=False) + "\n")
    return path
