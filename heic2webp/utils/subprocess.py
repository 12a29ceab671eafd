"""Subprocess helpers.

External encoder executables run through here so that every failure mode
(non-zero exit, timeout, missing executable) surfaces as a CommandError.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Iterable

# Lines of stderr carried into error messages.
_STDERR_TAIL = 20


@dataclass(frozen=True)
class RunResult:
    cmd: list[str]
    returncode: int
    stdout: str
    stderr: str


class CommandError(RuntimeError):
    def __init__(self, message: str, result: RunResult | None = None):
        super().__init__(message)
        self.result = result


def _tail(text: str) -> str:
    return "\n".join(text.strip().splitlines()[-_STDERR_TAIL:])


def run(cmd: Iterable[str], *, timeout_s: float | None = None) -> RunResult:
    """Run a command, capturing stdout/stderr.

    Raises CommandError on non-zero exit, timeout, or if the executable cannot be started.
    """

    cmd_list = [str(c) for c in cmd]

    try:
        proc = subprocess.run(cmd_list, capture_output=True, check=False, timeout=timeout_s)
    except subprocess.TimeoutExpired as e:
        raise CommandError(f"Command timed out after {timeout_s}s: {cmd_list[0]}") from e
    except OSError as e:
        raise CommandError(f"Could not run {cmd_list[0]}: {e}") from e

    res = RunResult(
        cmd=cmd_list,
        returncode=proc.returncode,
        stdout=(proc.stdout or b"").decode("utf-8", errors="replace"),
        stderr=(proc.stderr or b"").decode("utf-8", errors="replace"),
    )
    if res.returncode != 0:
        raise CommandError(
            f"{cmd_list[0]} exited with code {res.returncode}\n{_tail(res.stderr)}".rstrip(),
            res,
        )
    return res
