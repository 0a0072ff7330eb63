"""Shared plumbing for the built-in algorithm adapters."""

from __future__ import annotations

import logging
import math
import random
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, Sequence

from ..container import TraceableContainer
from ..errors import InvalidInput, TraceError
from ..trace_types import Number, Trace

logger = logging.getLogger(__name__)

AlgorithmFn = Callable[[Sequence[Number], Optional[random.Random]], Trace]


@contextmanager
def recording(values: Sequence[Number], label: str) -> Iterator[TraceableContainer]:
    """Open a private container for one run.

    A TraceError escaping the run is re-raised with the partial trace
    attached as ``exc.trace``.
    """
    logger.info("Running %s on %d values", label, len(values))
    container = TraceableContainer(values, label=label)
    try:
        yield container
    except TraceError as exc:
        if exc.trace is None:
            exc.trace = container.partial_trace()
        raise


def read_all(arr: TraceableContainer) -> list[Number]:
    return [arr.get(i) for i in range(len(arr))]


def is_ascending(arr: TraceableContainer) -> bool:
    values = read_all(arr)
    return all(a <= b for a, b in zip(values, values[1:]))


def mark_all_sorted(arr: TraceableContainer) -> None:
    if len(arr):
        arr.mark_range_sorted(0, len(arr) - 1)


def write_all(arr: TraceableContainer, values: Sequence[Number], why: Callable[[int, Number], str]) -> None:
    """Write *values* back position by position, narrating each write."""
    for k, value in enumerate(values):
        arr.set_next_description(why(k, value))
        arr.set(k, value)


def require_nonempty(arr: TraceableContainer, algorithm: str) -> list[Number]:
    values = read_all(arr)
    if not values:
        raise InvalidInput(f"{algorithm} needs at least one value to determine a range")
    non_finite = [v for v in values if not math.isfinite(v)]
    if non_finite:
        raise InvalidInput(f"{algorithm} cannot bucket non-finite value {non_finite[0]!r}")
    return values


def is_integral(value: Number) -> bool:
    return isinstance(value, int) or float(value).is_integer()
