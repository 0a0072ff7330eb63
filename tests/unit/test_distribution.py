"""Tests for counting, radix and bucket sort input handling."""

import pytest

from tracesort import constants
from tracesort.algorithms import run_algorithm
from tracesort.errors import InvalidInput

DISTRIBUTION_ALGORITHMS = ["counting-sort", "radix-sort", "bucket-sort"]


class TestEmptyInput:
    @pytest.mark.parametrize("name", DISTRIBUTION_ALGORITHMS)
    def test_empty_input_raises(self, name):
        with pytest.raises(InvalidInput):
            run_algorithm(name, [])

    @pytest.mark.parametrize("name", DISTRIBUTION_ALGORITHMS)
    def test_invalid_input_is_a_value_error(self, name):
        with pytest.raises(ValueError):
            run_algorithm(name, [])


class TestCountingSort:
    def test_narrates_range_and_placements(self):
        trace = run_algorithm("counting-sort", [5, 3, 8, 1, 9, 2])
        assert trace[1].description == "Range determined: 1 to 9 (9 values)"
        assert trace[3].description == "Placing 1 in its final position 0"
        assert trace.final_values == (1, 2, 3, 5, 8, 9)

    def test_counts_duplicates(self):
        trace = run_algorithm("counting-sort", [2, 0, 2])
        assert trace[2].description == "Counted occurrences: 0×1, 2×2"

    def test_negative_values(self):
        trace = run_algorithm("counting-sort", [-2, 3, -7])
        assert trace.final_values == (-7, -2, 3)

    def test_keeps_float_values(self):
        trace = run_algorithm("counting-sort", [2.0, 1.0])
        assert trace.final_values == (1.0, 2.0)
        assert all(isinstance(v, float) for v in trace.final_values)

    def test_rejects_fractional_values(self):
        with pytest.raises(InvalidInput, match="integral"):
            run_algorithm("counting-sort", [1.5, 2])

    def test_rejects_huge_range(self):
        with pytest.raises(InvalidInput, match="exceeds"):
            run_algorithm("counting-sort", [0, constants.MAX_COUNTING_RANGE])


class TestRadixSort:
    def test_one_pass_per_digit(self):
        trace = run_algorithm("radix-sort", [170, 45, 75, 90, 802, 24, 2, 66])
        passes = [s.description for s in trace if s.description.startswith("Sorting by digit")]
        assert passes == [
            "Sorting by digit at position 0 (divider: 1)",
            "Sorting by digit at position 1 (divider: 10)",
            "Sorting by digit at position 2 (divider: 100)",
        ]
        assert trace.final_values == (2, 24, 45, 66, 75, 90, 170, 802)

    def test_all_zero_needs_no_pass(self):
        trace = run_algorithm("radix-sort", [0, 0])
        assert trace.stats.writes == 0

    def test_keeps_value_types(self):
        trace = run_algorithm("radix-sort", [3.0, 1])
        assert trace.final_values == (1, 3.0)
        assert isinstance(trace.final_values[0], int)
        assert isinstance(trace.final_values[1], float)

    @pytest.mark.parametrize("values", [[3, -1], [2.5, 1]])
    def test_rejects_negative_or_fractional(self, values):
        with pytest.raises(InvalidInput, match="non-negative integral"):
            run_algorithm("radix-sort", values)


class TestBucketSort:
    def test_negative_and_fractional_values(self):
        values = [0.42, -3.5, 2.0, 1.25, -0.75, 9.0]
        trace = run_algorithm("bucket-sort", values)
        assert list(trace.final_values) == sorted(values)

    def test_announces_buckets(self):
        trace = run_algorithm("bucket-sort", [4, 1, 3, 2])
        assert trace[1].description == "Creating 2 buckets with size 1.50"

    def test_equal_values(self):
        trace = run_algorithm("bucket-sort", [5, 5, 5])
        assert trace.final_values == (5, 5, 5)

    def test_rejects_infinity(self):
        with pytest.raises(InvalidInput):
            run_algorithm("bucket-sort", [1.0, float("inf")])

    def test_rejects_unrepresentable_range(self):
        with pytest.raises(InvalidInput, match="cannot represent") as excinfo:
            run_algorithm("bucket-sort", [-1e308, 1e308])
        assert excinfo.value.trace is not None
