"""Run configuration data types (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from . import constants


class SandboxMode(str, Enum):
    """How caller-supplied sorting logic sees the values."""

    INSTRUMENTED = constants.MODE_INSTRUMENTED
    UNINSTRUMENTED = constants.MODE_UNINSTRUMENTED


@dataclass(frozen=True)
class SandboxConfig:
    """Groups sandbox execution limits."""

    mode: SandboxMode = SandboxMode.INSTRUMENTED
    entry_point: str = constants.DEFAULT_ENTRY_POINT
    max_line_events: int = constants.DEFAULT_MAX_LINE_EVENTS
    timeout_seconds: float = constants.DEFAULT_TIMEOUT_SECONDS
    step_limit: int = constants.DEFAULT_TRACE_STEP_LIMIT


@dataclass(frozen=True)
class TraceStats:
    """Operation counts for one recorded run."""

    comparisons: int = 0
    swaps: int = 0
    writes: int = 0
    steps: int = 0

    def to_dict(self) -> dict:
        return {
            "comparisons": self.comparisons,
            "swaps": self.swaps,
            "writes": self.writes,
            "steps": self.steps,
        }

    def report(self) -> str:
        return (
            f"{self.steps} steps: {self.comparisons} comparisons,"
            f" {self.swaps} swaps, {self.writes} writes"
        )
