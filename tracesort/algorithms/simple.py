"""Simple O(n²) sorts: bubble, selection, insertion."""

from __future__ import annotations

import random
from typing import Optional, Sequence

from ..container import TraceableContainer
from ..trace_types import Number, Trace
from ._base import mark_all_sorted, recording


def bubble_body(arr: TraceableContainer) -> None:
    n = len(arr)
    for i in range(n - 1):
        for j in range(n - i - 1):
            if arr.compare(j, j + 1) > 0:
                arr.swap(j, j + 1)
        arr.mark_sorted(n - 1 - i)
    if n:
        arr.mark_sorted(0)


def selection_body(arr: TraceableContainer) -> None:
    n = len(arr)
    for i in range(n - 1):
        arr.set_next_description(f"Finding minimum element from position {i} to {n - 1}")
        min_idx = i
        for j in range(i + 1, n):
            if arr.compare(j, min_idx) < 0:
                min_idx = j
        if min_idx != i:
            arr.set_next_description(
                f"Swapping {arr.get(i)} with minimum {arr.get(min_idx)}"
            )
            arr.swap(i, min_idx)
        arr.mark_sorted(i)
    if n:
        arr.mark_sorted(n - 1)


def insertion_body(arr: TraceableContainer, left: int = 0, right: int | None = None) -> None:
    """Insertion sort over ``[left, right]`` using adjacent swaps."""
    right = len(arr) - 1 if right is None else right
    for i in range(left + 1, right + 1):
        arr.set_next_description(f"Inserting {arr.get(i)} into the sorted portion")
        j = i
        while j > left and arr.compare(j - 1, j) > 0:
            arr.swap(j - 1, j)
            j -= 1


def bubble_sort(values: Sequence[Number], rng: Optional[random.Random] = None) -> Trace:
    with recording(values, "Bubble Sort") as arr:
        bubble_body(arr)
    return arr.get_trace()


def selection_sort(values: Sequence[Number], rng: Optional[random.Random] = None) -> Trace:
    with recording(values, "Selection Sort") as arr:
        selection_body(arr)
    return arr.get_trace()


def insertion_sort(values: Sequence[Number], rng: Optional[random.Random] = None) -> Trace:
    with recording(values, "Insertion Sort") as arr:
        insertion_body(arr)
        mark_all_sorted(arr)
    return arr.get_trace()
