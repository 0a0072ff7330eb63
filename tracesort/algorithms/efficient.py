"""O(n log n) sorts: quick, merge, heap, and a simplified tim sort."""

from __future__ import annotations

import random
from typing import Optional, Sequence

from .. import constants
from ..container import TraceableContainer
from ..trace_types import Number, Trace
from ._base import mark_all_sorted, recording
from .simple import insertion_body


def _partition(arr: TraceableContainer, low: int, high: int) -> int:
    pivot = arr.get(high)
    arr.set_next_description(
        f"Partitioning [{low}..{high}]: using {pivot} at position {high} as pivot"
    )
    i = low - 1
    for j in range(low, high):
        if arr.compare(j, high) < 0:
            i += 1
            arr.swap(i, j)
    if i + 1 != high:
        arr.set_next_description(
            f"Moving pivot {pivot} into its correct position at index {i + 1}"
        )
        arr.swap(i + 1, high)
    return i + 1


def quick_body(arr: TraceableContainer) -> None:
    # Explicit stack; sorted input would otherwise recurse n levels deep.
    pending = [(0, len(arr) - 1)]
    while pending:
        low, high = pending.pop()
        if low > high:
            continue
        if low == high:
            arr.mark_sorted(low)
            continue
        p = _partition(arr, low, high)
        arr.mark_sorted(p)
        pending.append((p + 1, high))
        pending.append((low, p - 1))


def merge_ranges(arr: TraceableContainer, left: int, mid: int, right: int) -> None:
    """Merge the sorted runs ``[left, mid]`` and ``[mid + 1, right]`` in place."""
    left_part = [arr.get(k) for k in range(left, mid + 1)]
    right_part = [arr.get(k) for k in range(mid + 1, right + 1)]
    arr.note(f"Merging subarrays [{left}..{mid}] and [{mid + 1}..{right}]")

    i = j = 0
    k = left
    while i < len(left_part) and j < len(right_part):
        a, b = left_part[i], right_part[j]
        if a <= b:
            value, i = a, i + 1
        else:
            value, j = b, j + 1
        arr.set_next_description(f"Comparing {a} and {b}: writing {value} at position {k}")
        arr.set(k, value)
        k += 1
    for value in left_part[i:] + right_part[j:]:
        arr.set_next_description(f"Copying remaining {value} to position {k}")
        arr.set(k, value)
        k += 1


def merge_body(arr: TraceableContainer) -> None:
    def sort_range(left: int, right: int) -> None:
        if left >= right:
            return
        mid = (left + right) // 2
        sort_range(left, mid)
        sort_range(mid + 1, right)
        merge_ranges(arr, left, mid, right)

    sort_range(0, len(arr) - 1)


def _sift_down(arr: TraceableContainer, root: int, size: int) -> None:
    while True:
        largest = root
        left, right = 2 * root + 1, 2 * root + 2
        if left < size and arr.compare(left, largest) > 0:
            largest = left
        if right < size and arr.compare(right, largest) > 0:
            largest = right
        if largest == root:
            return
        arr.set_next_description(
            f"Heapifying: swapping {arr.get(root)} with {arr.get(largest)}"
        )
        arr.swap(root, largest)
        root = largest


def heap_body(arr: TraceableContainer) -> None:
    n = len(arr)
    for i in range(n // 2 - 1, -1, -1):
        _sift_down(arr, i, n)
    arr.note("Max heap built successfully")
    for end in range(n - 1, 0, -1):
        arr.set_next_description(f"Moving max element {arr.get(0)} to position {end}")
        arr.swap(0, end)
        arr.mark_sorted(end)
        _sift_down(arr, 0, end)
    if n:
        arr.mark_sorted(0)


def tim_body(arr: TraceableContainer, min_run: int = constants.TIM_MIN_RUN) -> None:
    n = len(arr)
    for start in range(0, n, min_run):
        insertion_body(arr, start, min(start + min_run - 1, n - 1))
    size = min_run
    while size < n:
        for start in range(0, n, size * 2):
            mid = start + size - 1
            end = min(start + size * 2 - 1, n - 1)
            if mid < end:
                merge_ranges(arr, start, mid, end)
        size *= 2


def quick_sort(values: Sequence[Number], rng: Optional[random.Random] = None) -> Trace:
    with recording(values, "Quick Sort") as arr:
        quick_body(arr)
    return arr.get_trace()


def merge_sort(values: Sequence[Number], rng: Optional[random.Random] = None) -> Trace:
    with recording(values, "Merge Sort") as arr:
        merge_body(arr)
        mark_all_sorted(arr)
    return arr.get_trace()


def heap_sort(values: Sequence[Number], rng: Optional[random.Random] = None) -> Trace:
    with recording(values, "Heap Sort") as arr:
        heap_body(arr)
    return arr.get_trace()


def tim_sort(values: Sequence[Number], rng: Optional[random.Random] = None) -> Trace:
    with recording(values, "Tim Sort") as arr:
        tim_body(arr)
        mark_all_sorted(arr)
    return arr.get_trace()
