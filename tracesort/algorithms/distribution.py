"""Non-comparison sorts: counting, radix, bucket.

Each validates that the input is representable before distributing it,
then writes the result back through ``set`` so every placement is recorded.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Optional, Sequence

from .. import constants
from ..container import TraceableContainer
from ..errors import InvalidInput
from ..trace_types import Number, Trace
from ._base import is_integral, mark_all_sorted, recording, require_nonempty, write_all

logger = logging.getLogger(__name__)


def counting_body(arr: TraceableContainer) -> None:
    values = require_nonempty(arr, "Counting Sort")
    if not all(is_integral(v) for v in values):
        raise InvalidInput("Counting Sort requires integral values")
    ints = [int(v) for v in values]
    low, high = min(ints), max(ints)
    span = high - low + 1
    if span > constants.MAX_COUNTING_RANGE:
        raise InvalidInput(
            f"Counting Sort range {span} exceeds the limit of {constants.MAX_COUNTING_RANGE}"
        )
    arr.note(f"Range determined: {low} to {high} ({span} values)")

    # Each slot keeps the original value objects so 2.0 stays a float.
    slots: list[list[Number]] = [[] for _ in range(span)]
    for key, v in zip(ints, values):
        slots[key - low].append(v)
    arr.note(
        "Counted occurrences: "
        + ", ".join(f"{low + k}×{len(s)}" for k, s in enumerate(slots) if s)
    )

    output = [v for slot in slots for v in slot]
    write_all(arr, output, lambda k, v: f"Placing {v} in its final position {k}")


def _digit(value: Number, exp: int) -> int:
    return (int(value) // exp) % constants.RADIX_BASE


def radix_body(arr: TraceableContainer) -> None:
    values = require_nonempty(arr, "Radix Sort")
    if not all(is_integral(v) and v >= 0 for v in values):
        raise InvalidInput("Radix Sort requires non-negative integral values")
    largest = int(max(values))
    exp = 1
    position = 0
    while largest // exp > 0:
        arr.note(f"Sorting by digit at position {position} (divider: {exp})")
        buckets: list[list[Number]] = [[] for _ in range(constants.RADIX_BASE)]
        for v in values:
            buckets[_digit(v, exp)].append(v)
        values = [v for bucket in buckets for v in bucket]
        write_all(
            arr,
            values,
            lambda k, v, e=exp: f"Placing {v} (digit {_digit(v, e)}) at position {k}",
        )
        exp *= constants.RADIX_BASE
        position += 1


def bucket_body(arr: TraceableContainer) -> None:
    values = require_nonempty(arr, "Bucket Sort")
    n = len(values)
    if n == 1:
        return
    low, high = min(values), max(values)
    if not math.isfinite(high - low):
        raise InvalidInput(
            f"Bucket Sort cannot represent the range {low} to {high}"
        )
    bucket_count = max(1, math.isqrt(n))
    width = (high - low) / bucket_count
    arr.note(f"Creating {bucket_count} buckets with size {width:.2f}")

    buckets: list[list[Number]] = [[] for _ in range(bucket_count)]
    for v in values:
        idx = min(int((v - low) / width), bucket_count - 1) if width > 0 else 0
        buckets[idx].append(v)
    logger.debug("Bucket sizes: %s", [len(b) for b in buckets])

    k = 0
    for b, bucket in enumerate(buckets):
        if not bucket:
            continue
        for value in sorted(bucket):
            arr.set_next_description(f"Placing {value} from bucket {b} at position {k}")
            arr.set(k, value)
            k += 1


def counting_sort(values: Sequence[Number], rng: Optional[random.Random] = None) -> Trace:
    with recording(values, "Counting Sort") as arr:
        counting_body(arr)
        mark_all_sorted(arr)
    return arr.get_trace()


def radix_sort(values: Sequence[Number], rng: Optional[random.Random] = None) -> Trace:
    with recording(values, "Radix Sort") as arr:
        radix_body(arr)
        mark_all_sorted(arr)
    return arr.get_trace()


def bucket_sort(values: Sequence[Number], rng: Optional[random.Random] = None) -> Trace:
    with recording(values, "Bucket Sort") as arr:
        bucket_body(arr)
        mark_all_sorted(arr)
    return arr.get_trace()
