"""Gap-based and bidirectional refinements of the simple sorts."""

from __future__ import annotations

import random
from typing import Optional, Sequence

from .. import constants
from ..container import TraceableContainer
from ..trace_types import Number, Trace
from ._base import mark_all_sorted, recording


def shell_body(arr: TraceableContainer) -> None:
    n = len(arr)
    gap = n // 2
    while gap > 0:
        arr.note(f"Using gap size: {gap}")
        for i in range(gap, n):
            j = i
            while j >= gap and arr.compare(j - gap, j) > 0:
                arr.set_next_description(
                    f"Moving {arr.get(j - gap)} forward by gap {gap}"
                )
                arr.swap(j - gap, j)
                j -= gap
        gap //= 2


def comb_body(arr: TraceableContainer) -> None:
    n = len(arr)
    gap = n
    swapped = True
    while gap > 1 or swapped:
        new_gap = max(1, int(gap / constants.COMB_SHRINK_FACTOR))
        if new_gap != gap:
            arr.note(f"Using gap size: {new_gap}")
        gap = new_gap
        swapped = False
        for i in range(n - gap):
            if arr.compare(i, i + gap) > 0:
                arr.swap(i, i + gap)
                swapped = True


def cocktail_body(arr: TraceableContainer) -> None:
    left, right = 0, len(arr) - 1
    swapped = True
    while swapped and left < right:
        swapped = False
        for i in range(left, right):
            if arr.compare(i, i + 1) > 0:
                arr.swap(i, i + 1)
                swapped = True
        arr.mark_sorted(right)
        right -= 1
        if not swapped:
            break

        swapped = False
        for i in range(right, left, -1):
            if arr.compare(i - 1, i) > 0:
                arr.swap(i - 1, i)
                swapped = True
        arr.mark_sorted(left)
        left += 1


def shell_sort(values: Sequence[Number], rng: Optional[random.Random] = None) -> Trace:
    with recording(values, "Shell Sort") as arr:
        shell_body(arr)
        mark_all_sorted(arr)
    return arr.get_trace()


def comb_sort(values: Sequence[Number], rng: Optional[random.Random] = None) -> Trace:
    with recording(values, "Comb Sort") as arr:
        comb_body(arr)
        mark_all_sorted(arr)
    return arr.get_trace()


def cocktail_sort(values: Sequence[Number], rng: Optional[random.Random] = None) -> Trace:
    with recording(values, "Cocktail Sort") as arr:
        cocktail_body(arr)
        mark_all_sorted(arr)
    return arr.get_trace()
