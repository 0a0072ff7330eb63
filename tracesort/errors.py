"""Error kinds raised by the trace recording engine."""

from __future__ import annotations

from typing import Any


class TraceError(Exception):
    """Base class for every error raised while recording a trace.

    Adapters attach the partial trace recorded before the failure as
    ``trace`` so callers can still show progress up to that point.
    """

    trace: Any = None


class OutOfRange(TraceError, IndexError):
    """An index outside ``[0, length)``."""

    pass


class InvalidIndices(TraceError, IndexError):
    """A malformed index pair for ``compare`` or ``swap``."""

    pass


class InvalidRange(TraceError, ValueError):
    """A malformed ``start``/``end`` pair for range marking."""

    pass


class InvalidInput(TraceError, ValueError):
    """Input values an algorithm cannot work with (empty, non-integral, ...)."""

    pass


class TraceSealedError(TraceError, RuntimeError):
    """A recording operation was attempted after the trace was handed out."""

    pass


class StepLimitExceeded(TraceError, RuntimeError):
    """The container recorded more Steps than its configured limit."""

    pass


class UserCodeError(TraceError):
    """Caller-supplied code raised, broke policy, or returned a malformed result."""

    def __init__(
        self,
        message: str,
        kind: str = "runtime",
        error_type: str = "",
        line: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.error_type = error_type
        self.line = line

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"kind": self.kind, "message": self.message}
        if self.error_type:
            d["error_type"] = self.error_type
        if self.line is not None:
            d["line"] = self.line
        return d

    def __str__(self) -> str:
        where = f" (line {self.line})" if self.line is not None else ""
        prefix = f"{self.error_type}: " if self.error_type else ""
        return f"[{self.kind}] {prefix}{self.message}{where}"
