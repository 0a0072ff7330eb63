"""Novelty sorts: gnome, pancake, bogo, miracle, quantum bogo, sleep.

Bogo sort draws from an injected ``random.Random`` so shuffles are
reproducible, and stops after a fixed number of attempts. The check-and-
declare sorts never claim a result they did not produce: miracle sort
reports failure, quantum bogo sort says it falls back to a classical sort.
"""

from __future__ import annotations

import heapq
import logging
import math
import random
from typing import Optional, Sequence

from .. import constants
from ..container import TraceableContainer
from ..errors import InvalidInput
from ..trace_types import Number, Trace
from ._base import is_ascending, mark_all_sorted, read_all, recording
from .simple import selection_body

logger = logging.getLogger(__name__)


def gnome_body(arr: TraceableContainer) -> None:
    n = len(arr)
    index = 0
    while index < n:
        if index == 0 or arr.compare(index - 1, index) <= 0:
            index += 1
        else:
            arr.swap(index - 1, index)
            index -= 1


def _flip(arr: TraceableContainer, k: int) -> None:
    arr.set_next_description(f"Flipping first {k + 1} elements")
    left = 0
    while left < k:
        arr.swap(left, k)
        left += 1
        k -= 1


def pancake_body(arr: TraceableContainer) -> None:
    n = len(arr)
    for size in range(n, 1, -1):
        max_idx = 0
        for i in range(1, size):
            if arr.compare(i, max_idx) > 0:
                max_idx = i
        if max_idx != size - 1:
            if max_idx != 0:
                _flip(arr, max_idx)
            _flip(arr, size - 1)
        arr.mark_sorted(size - 1)
    if n:
        arr.mark_sorted(0)


def bogo_body(
    arr: TraceableContainer,
    rng: random.Random,
    max_attempts: int = constants.BOGO_MAX_ATTEMPTS,
) -> bool:
    """Shuffle until ascending or *max_attempts* shuffles; return whether it sorted."""
    n = len(arr)
    attempts = 0
    while not is_ascending(arr):
        if attempts >= max_attempts:
            arr.give_up(
                f"Bogo Sort gave up after {attempts} attempts;"
                " the array is still not sorted"
            )
            return False
        attempts += 1
        logger.debug("Bogo Sort shuffle attempt %d", attempts)
        arr.note(f"Randomly shuffling array (attempt {attempts})...")
        for i in range(n - 1, 0, -1):
            arr.swap(i, rng.randint(0, i))
    mark_all_sorted(arr)
    arr.note(f"Bogo Sort succeeded after {attempts} attempts! Pure luck!")
    return True


def miracle_body(arr: TraceableContainer) -> bool:
    if is_ascending(arr):
        mark_all_sorted(arr)
        arr.note("Miracle! The array was already sorted!")
        return True
    arr.note("Array is not sorted. Waiting for a miracle...")
    arr.give_up("Miracle did not occur. The array remains unsorted.")
    return False


def quantum_bogo_body(arr: TraceableContainer) -> None:
    if is_ascending(arr):
        mark_all_sorted(arr)
        arr.note("Quantum measurement found the array already in its sorted state")
        return
    arr.note(
        "No quantum computer available to collapse the superposition;"
        " falling back to a classical selection sort"
    )
    selection_body(arr)


def sleep_body(arr: TraceableContainer) -> None:
    values = read_all(arr)
    bad = [v for v in values if not math.isfinite(v) or v < 0]
    if bad:
        raise InvalidInput(f"Sleep Sort cannot sleep for {bad[0]!r} ticks")
    arr.note("Every element falls asleep for as many ticks as its value")
    # Equal values wake in their original order.
    timers = [(v, i) for i, v in enumerate(values)]
    heapq.heapify(timers)
    k = 0
    while timers:
        value, _ = heapq.heappop(timers)
        arr.set_next_description(f"{value} woke up after sleeping for {value} ticks")
        arr.set(k, value)
        arr.mark_sorted(k)
        k += 1


def gnome_sort(values: Sequence[Number], rng: Optional[random.Random] = None) -> Trace:
    with recording(values, "Gnome Sort") as arr:
        gnome_body(arr)
        mark_all_sorted(arr)
    return arr.get_trace()


def pancake_sort(values: Sequence[Number], rng: Optional[random.Random] = None) -> Trace:
    with recording(values, "Pancake Sort") as arr:
        pancake_body(arr)
    return arr.get_trace()


def bogo_sort(values: Sequence[Number], rng: Optional[random.Random] = None) -> Trace:
    with recording(values, "Bogo Sort") as arr:
        bogo_body(arr, rng or random.Random())
    return arr.get_trace()


def miracle_sort(values: Sequence[Number], rng: Optional[random.Random] = None) -> Trace:
    with recording(values, "Miracle Sort") as arr:
        miracle_body(arr)
    return arr.get_trace()


def quantum_bogo_sort(values: Sequence[Number], rng: Optional[random.Random] = None) -> Trace:
    with recording(values, "Quantum Bogo Sort") as arr:
        quantum_bogo_body(arr)
    return arr.get_trace()


def sleep_sort(values: Sequence[Number], rng: Optional[random.Random] = None) -> Trace:
    with recording(values, "Sleep Sort") as arr:
        sleep_body(arr)
    return arr.get_trace()
