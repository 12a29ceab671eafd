"""Per-file results and the batch summary."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union


@dataclass(frozen=True)
class Success:
    input_bytes: int
    output_bytes: int
    width: int
    height: int


@dataclass(frozen=True)
class Failure:
    kind: str  # "decode"|"encode"|"write"
    reason: str


Outcome = Union[Success, Failure]


@dataclass(frozen=True)
class ConversionResult:
    source: Path
    destination: Path
    outcome: Outcome

    @property
    def ok(self) -> bool:
        return isinstance(self.outcome, Success)

    @property
    def compression_ratio(self) -> float | None:
        """1 - output/input for successes; None for failures."""

        o = self.outcome
        if not isinstance(o, Success):
            return None
        if o.input_bytes <= 0:
            return 0.0
        return 1.0 - o.output_bytes / o.input_bytes


@dataclass(frozen=True)
class BatchSummary:
    """Ordered results of one batch. Counts are always derived from results."""

    results: tuple[ConversionResult, ...] = ()

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def ok(self) -> bool:
        return self.failed == 0

    @property
    def failures(self) -> list[ConversionResult]:
        return [r for r in self.results if not r.ok]
