"""Instrumented value sequence that records a Step per observable operation."""

from __future__ import annotations

import logging
import math
from typing import Sequence

from . import constants
from .errors import (
    InvalidIndices,
    InvalidInput,
    InvalidRange,
    OutOfRange,
    StepLimitExceeded,
    TraceSealedError,
)
from .run_types import TraceStats
from .trace_types import Element, ElementState, Number, Step, Trace

logger = logging.getLogger(__name__)


def _is_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def _sign(a: Number, b: Number) -> int:
    return (a > b) - (a < b)


class TraceableContainer:
    """Fixed-length value sequence whose every mutation and comparison is recorded.

    The container owns the live elements and the Steps recorded so far.
    ``get_trace()`` seals it and hands the finished Trace to the caller.
    """

    def __init__(
        self,
        values: Sequence[Number],
        label: str = constants.DEFAULT_LABEL,
        ids: Sequence[str] | None = None,
        step_limit: int | None = None,
    ):
        values = list(values)
        bad = [v for v in values if not _is_number(v)]
        if bad:
            raise InvalidInput(f"Values must be non-NaN numbers, got {bad[0]!r}")
        if ids is None:
            ids = [constants.ELEMENT_ID_TEMPLATE.format(index=i) for i in range(len(values))]
        elif len(ids) != len(values):
            raise InvalidInput(
                f"Got {len(ids)} element ids for {len(values)} values"
            )
        self._elements: list[Element] = [
            Element(value=v, id=str(ident)) for v, ident in zip(values, ids)
        ]
        self._sorted: set[int] = set()
        self._steps: list[Step] = []
        self._pending_description = ""
        self._label = label
        self._step_limit = step_limit
        self._converged = True
        self._sealed = False
        self._trace: Trace | None = None
        self._comparisons = 0
        self._swaps = 0
        self._writes = 0
        self._append(f"Starting {label}")

    # ── Pure accessors ───────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._elements)

    def length(self) -> int:
        return len(self._elements)

    @property
    def label(self) -> str:
        return self._label

    def get(self, i: int) -> Number:
        self._check_index(i)
        return self._elements[i].value

    def values(self) -> list[Number]:
        return [e.value for e in self._elements]

    def is_marked_sorted(self, i: int) -> bool:
        self._check_index(i)
        return i in self._sorted

    # ── Recording operations ─────────────────────────────────────

    def set(self, i: int, value: Number) -> None:
        self._check_index(i)
        if not _is_number(value):
            raise InvalidInput(f"Cannot store non-numeric value {value!r}")
        self._ensure_open()
        self._elements[i] = Element(value=value, id=self._elements[i].id)
        self._writes += 1
        self._append(f"Set element at index {i} to {value}")

    def compare(self, i: int, j: int) -> int:
        self._check_pair(i, j)
        a, b = self._elements[i].value, self._elements[j].value
        self._comparisons += 1
        self._append(
            f"Comparing elements at positions {i} and {j}: {a} vs {b}",
            overlay={i: ElementState.COMPARING, j: ElementState.COMPARING},
            compare_indices=(i, j),
        )
        return _sign(a, b)

    def swap(self, i: int, j: int) -> None:
        self._check_pair(i, j)
        if i == j:
            return
        a, b = self._elements[i].value, self._elements[j].value
        self._append(
            f"Swapping elements at positions {i} and {j}: {a} ↔ {b}",
            overlay={i: ElementState.SWAPPING, j: ElementState.SWAPPING},
            swap_indices=(i, j),
        )
        self._elements[i], self._elements[j] = self._elements[j], self._elements[i]
        self._swaps += 1
        self._append(
            f"Swapped! Position {i} now has {self._elements[i].value},"
            f" position {j} now has {self._elements[j].value}"
        )

    def mark_sorted(self, i: int) -> None:
        self._check_index(i)
        self._ensure_open()
        self._sorted.add(i)
        self._append(
            f"Element at position {i} ({self._elements[i].value})"
            " is now in its final sorted position",
            sorted_indices=(i,),
        )

    def mark_range_sorted(self, start: int, end: int) -> None:
        if not (_is_index(start) and _is_index(end)):
            raise InvalidRange(f"Invalid range: {start!r} to {end!r}")
        if start < 0 or start > end or end >= len(self._elements):
            raise InvalidRange(f"Invalid range: {start} to {end}")
        self._ensure_open()
        indices = tuple(range(start, end + 1))
        self._sorted.update(indices)
        self._append(
            f"Elements from position {start} to {end} are now sorted",
            sorted_indices=indices,
        )

    def set_next_description(self, text: str) -> None:
        self._pending_description = str(text)

    def note(self, text: str) -> None:
        """Record a narrative-only Step with no index markers."""
        self._pending_description = ""
        self._append(str(text))

    def give_up(self, text: str) -> None:
        """Record a terminal narrative Step and flag the run as not converged."""
        self._converged = False
        logger.warning("%s: %s", self._label, text)
        self.note(text)

    # ── Trace hand-off ───────────────────────────────────────────

    def get_trace(self) -> Trace:
        """Seal the container and return the finished Trace.

        The trace ends with a synthetic Step marking every element sorted.
        This is a presentation convenience, not a claim about the values.
        """
        if self._trace is not None and self._trace.complete:
            return self._trace
        self._sealed = True
        final = Step(
            index=len(self._steps),
            snapshot=tuple(
                Element(e.value, e.id, ElementState.SORTED) for e in self._elements
            ),
            description=constants.COMPLETED_DESCRIPTION,
        )
        self._trace = self._build_trace(tuple(self._steps) + (final,), complete=True)
        logger.info(
            "Trace for %s finished: %s", self._label, self._trace.stats.report()
        )
        return self._trace

    def partial_trace(self) -> Trace:
        """Seal the container and return only the Steps recorded so far."""
        self._sealed = True
        return self._build_trace(tuple(self._steps), complete=False)

    def _build_trace(self, steps: tuple[Step, ...], complete: bool) -> Trace:
        return Trace(
            algorithm=self._label,
            steps=steps,
            final_values=tuple(self.values()),
            converged=self._converged,
            complete=complete,
            stats=TraceStats(
                comparisons=self._comparisons,
                swaps=self._swaps,
                writes=self._writes,
                steps=len(steps),
            ),
        )

    # ── Internals ────────────────────────────────────────────────

    def _check_index(self, i) -> None:
        if not _is_index(i) or not 0 <= i < len(self._elements):
            raise OutOfRange(f"Index {i!r} out of bounds for length {len(self._elements)}")

    def _check_pair(self, i, j) -> None:
        n = len(self._elements)
        if not (_is_index(i) and _is_index(j)) or not (0 <= i < n and 0 <= j < n):
            raise InvalidIndices(f"Invalid indices: {i!r}, {j!r}")

    def _ensure_open(self) -> None:
        if self._sealed:
            raise TraceSealedError(f"Trace for {self._label} has already been handed out")

    def _snapshot(self, overlay: dict[int, ElementState]) -> tuple[Element, ...]:
        snapshot = []
        for idx, el in enumerate(self._elements):
            if idx in self._sorted:
                state = ElementState.SORTED
            else:
                state = overlay.get(idx, ElementState.DEFAULT)
            snapshot.append(Element(el.value, el.id, state))
        return tuple(snapshot)

    def _append(
        self,
        default_description: str,
        overlay: dict[int, ElementState] | None = None,
        compare_indices: tuple[int, int] | None = None,
        swap_indices: tuple[int, int] | None = None,
        sorted_indices: tuple[int, ...] | None = None,
    ) -> None:
        self._ensure_open()
        if self._step_limit is not None and len(self._steps) >= self._step_limit:
            raise StepLimitExceeded(
                f"{self._label} exceeded the limit of {self._step_limit} recorded steps"
            )
        description = self._pending_description or default_description
        self._pending_description = ""
        step = Step(
            index=len(self._steps),
            snapshot=self._snapshot(overlay or {}),
            description=description,
            compare_indices=compare_indices,
            swap_indices=swap_indices,
            sorted_indices=sorted_indices,
        )
        self._steps.append(step)
        logger.debug("[step %d] %s", step.index, description)


def _is_index(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
