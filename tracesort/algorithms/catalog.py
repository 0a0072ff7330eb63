"""Algorithm metadata shown next to a trace (names, families, complexities)."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class AlgorithmFamily(str, Enum):
    SIMPLE = "simple"
    EFFICIENT = "efficient"
    IMPROVED = "improved"
    DISTRIBUTION = "distribution"
    NOVELTY = "novelty"


class AlgorithmInfo(BaseModel):
    name: str
    display_name: str
    family: AlgorithmFamily
    time_complexity: str
    space_complexity: str
    description: str
    deterministic: bool = True


ALGORITHM_CATALOG: dict[str, AlgorithmInfo] = {
    info.name: info
    for info in (
        AlgorithmInfo(
            name="bubble-sort",
            display_name="Bubble Sort",
            family=AlgorithmFamily.SIMPLE,
            time_complexity="O(n²)",
            space_complexity="O(1)",
            description="Repeatedly swaps adjacent elements that are out of order.",
        ),
        AlgorithmInfo(
            name="selection-sort",
            display_name="Selection Sort",
            family=AlgorithmFamily.SIMPLE,
            time_complexity="O(n²)",
            space_complexity="O(1)",
            description="Finds the minimum of the unsorted part and moves it to the front.",
        ),
        AlgorithmInfo(
            name="insertion-sort",
            display_name="Insertion Sort",
            family=AlgorithmFamily.SIMPLE,
            time_complexity="O(n²)",
            space_complexity="O(1)",
            description="Grows a sorted prefix by inserting one element at a time.",
        ),
        AlgorithmInfo(
            name="quick-sort",
            display_name="Quick Sort",
            family=AlgorithmFamily.EFFICIENT,
            time_complexity="O(n log n) avg, O(n²) worst",
            space_complexity="O(log n)",
            description="Partitions around the last element as pivot, then sorts each side.",
        ),
        AlgorithmInfo(
            name="merge-sort",
            display_name="Merge Sort",
            family=AlgorithmFamily.EFFICIENT,
            time_complexity="O(n log n)",
            space_complexity="O(n)",
            description="Splits into halves and merges the sorted halves back together.",
        ),
        AlgorithmInfo(
            name="heap-sort",
            display_name="Heap Sort",
            family=AlgorithmFamily.EFFICIENT,
            time_complexity="O(n log n)",
            space_complexity="O(1)",
            description="Builds a max heap, then repeatedly moves the root to the end.",
        ),
        AlgorithmInfo(
            name="tim-sort",
            display_name="Tim Sort",
            family=AlgorithmFamily.EFFICIENT,
            time_complexity="O(n log n)",
            space_complexity="O(n)",
            description="Insertion-sorts fixed-size runs, then merges runs bottom-up.",
        ),
        AlgorithmInfo(
            name="shell-sort",
            display_name="Shell Sort",
            family=AlgorithmFamily.IMPROVED,
            time_complexity="O(n^1.25) to O(n²)",
            space_complexity="O(1)",
            description="Insertion sort over a shrinking sequence of gaps.",
        ),
        AlgorithmInfo(
            name="comb-sort",
            display_name="Comb Sort",
            family=AlgorithmFamily.IMPROVED,
            time_complexity="O(n²) worst, O(n log n) avg",
            space_complexity="O(1)",
            description="Bubble sort with a gap that shrinks by 1.3 each pass.",
        ),
        AlgorithmInfo(
            name="cocktail-sort",
            display_name="Cocktail Sort",
            family=AlgorithmFamily.IMPROVED,
            time_complexity="O(n²)",
            space_complexity="O(1)",
            description="Bubble sort that alternates forward and backward passes.",
        ),
        AlgorithmInfo(
            name="gnome-sort",
            display_name="Gnome Sort",
            family=AlgorithmFamily.NOVELTY,
            time_complexity="O(n²)",
            space_complexity="O(1)",
            description="Steps forward while ordered, swaps and steps back otherwise.",
        ),
        AlgorithmInfo(
            name="pancake-sort",
            display_name="Pancake Sort",
            family=AlgorithmFamily.NOVELTY,
            time_complexity="O(n²)",
            space_complexity="O(1)",
            description="Sorts using only prefix reversals.",
        ),
        AlgorithmInfo(
            name="counting-sort",
            display_name="Counting Sort",
            family=AlgorithmFamily.DISTRIBUTION,
            time_complexity="O(n + k)",
            space_complexity="O(k)",
            description="Counts each integer value and writes them back in order.",
        ),
        AlgorithmInfo(
            name="radix-sort",
            display_name="Radix Sort",
            family=AlgorithmFamily.DISTRIBUTION,
            time_complexity="O(d × (n + k))",
            space_complexity="O(n + k)",
            description="Stable distribution by each decimal digit, least significant first.",
        ),
        AlgorithmInfo(
            name="bucket-sort",
            display_name="Bucket Sort",
            family=AlgorithmFamily.DISTRIBUTION,
            time_complexity="O(n + k) avg, O(n²) worst",
            space_complexity="O(n + k)",
            description="Spreads values over √n buckets, sorts and concatenates them.",
        ),
        AlgorithmInfo(
            name="bogo-sort",
            display_name="Bogo Sort",
            family=AlgorithmFamily.NOVELTY,
            time_complexity="O((n+1)!) avg, O(∞) worst",
            space_complexity="O(1)",
            description="Shuffles until sorted, giving up after 50 attempts.",
            deterministic=False,
        ),
        AlgorithmInfo(
            name="miracle-sort",
            display_name="Miracle Sort",
            family=AlgorithmFamily.NOVELTY,
            time_complexity="O(n) check, O(∞) otherwise",
            space_complexity="O(1)",
            description="Checks whether the array is sorted and otherwise reports failure.",
        ),
        AlgorithmInfo(
            name="quantum-bogo-sort",
            display_name="Quantum Bogo Sort",
            family=AlgorithmFamily.NOVELTY,
            time_complexity="O(n²) classical fallback",
            space_complexity="O(1)",
            description="Checks for a sorted state, else falls back to selection sort.",
        ),
        AlgorithmInfo(
            name="sleep-sort",
            display_name="Sleep Sort",
            family=AlgorithmFamily.NOVELTY,
            time_complexity="O(n log n) simulated",
            space_complexity="O(n)",
            description="Simulates elements waking up after sleeping for their value.",
        ),
    )
}
