"""Tests for running caller-supplied sorting programs in the sandbox."""

import pytest

from tracesort import constants
from tracesort.errors import InvalidInput, UserCodeError
from tracesort.run_types import SandboxConfig, SandboxMode
from tracesort.sandbox import (
    INSTRUMENTED_TEMPLATE,
    PLAIN_TEMPLATE,
    ContainerHandle,
    run_user_program,
)
from tracesort.container import TraceableContainer
from tracesort.trace_types import ElementState

PLAIN = SandboxConfig(mode=SandboxMode.UNINSTRUMENTED)

COMPARE_THEN_RAISE = """\
def custom_sort(arr):
    arr.compare(0, 1)
    raise ValueError("boom")
"""

INFINITE_LOOP = """\
def custom_sort(arr):
    while True:
        arr.length()
"""

SWALLOWING_LOOP = """\
def custom_sort(arr):
    try:
        while True:
            arr.length()
    except Exception:
        pass
"""

FRAME_WALK = """\
def custom_sort(arr):
    box = []
    def grab():
        return box[0].gi_frame.f_back.f_back
    g = (grab() for _ in [0])
    box.append(g)
    frame = next(g)
    arr.set_next_description(str(frame.f_globals["sys"].modules["os"].getpid()))
    arr.compare(0, 1)
"""


class TestContainerHandle:
    def test_exposes_only_recording_operations(self):
        public = {name for name in dir(ContainerHandle) if not name.startswith("_")}
        assert public == {
            "get",
            "set",
            "compare",
            "swap",
            "mark_sorted",
            "mark_range_sorted",
            "set_next_description",
            "length",
        }

    def test_has_no_instance_dict(self):
        handle = ContainerHandle(TraceableContainer([1, 2]))
        assert not hasattr(handle, "__dict__")
        assert len(handle) == 2


class TestInstrumented:
    def test_template_sorts(self):
        result = run_user_program(INSTRUMENTED_TEMPLATE, [5, 3, 8, 1])
        assert result.ok
        assert result.error is None
        trace = result.trace
        assert trace.complete
        assert trace.final_values == (1, 3, 5, 8)
        assert trace[0].description == "Starting custom algorithm (instrumented)"
        assert trace[1].compare_indices == (0, 1)
        assert trace[2].swap_indices == (0, 1)
        assert trace.last.description == constants.COMPLETED_DESCRIPTION

    def test_input_is_not_mutated(self):
        values = [4, 3, 2, 1]
        run_user_program(INSTRUMENTED_TEMPLATE, values)
        assert values == [4, 3, 2, 1]

    def test_custom_descriptions(self):
        source = """\
def custom_sort(arr):
    arr.set_next_description("Checking the ends")
    arr.compare(0, arr.length() - 1)
"""
        result = run_user_program(source, [2, 1, 3])
        assert result.trace[1].description == "Checking the ends"

    def test_custom_entry_point(self):
        source = "def my_sort(arr):\n    arr.swap(0, 1)\n"
        config = SandboxConfig(entry_point="my_sort")
        result = run_user_program(source, [2, 1], config)
        assert result.ok
        assert result.trace.final_values == (1, 2)

    def test_host_input_errors_propagate(self):
        with pytest.raises(InvalidInput):
            run_user_program(INSTRUMENTED_TEMPLATE, [1, "a"])


class TestInstrumentedFailures:
    def test_compare_then_raise_keeps_partial_trace(self):
        result = run_user_program(COMPARE_THEN_RAISE, [2, 1, 3])
        assert not result.ok
        error = result.error
        assert error.kind == "runtime"
        assert error.error_type == "ValueError"
        assert error.message == "boom"
        assert error.line == 3
        trace = result.trace
        assert not trace.complete
        assert len(trace) == 2
        assert trace[1].compare_indices == (0, 1)
        assert error.trace is trace

    def test_out_of_range_reports_user_line(self):
        source = "def custom_sort(arr):\n    x = 1\n    arr.get(10)\n"
        result = run_user_program(source, [1, 2])
        assert result.error.error_type == "OutOfRange"
        assert result.error.line == 3

    def test_missing_entry_point(self):
        result = run_user_program("def other(arr):\n    pass\n", [1, 2])
        assert result.error.kind == "entry"
        assert len(result.trace) == 1

    def test_policy_violation_records_nothing(self):
        source = "import os\n" + INSTRUMENTED_TEMPLATE
        result = run_user_program(source, [2, 1])
        assert result.error.kind == "policy"
        assert result.error.line == 1
        assert len(result.trace) == 1

    def test_escape_through_dunder_is_rejected(self):
        source = "def custom_sort(arr):\n    arr.__class__\n"
        assert run_user_program(source, [2, 1]).error.kind == "policy"

    def test_escape_through_generator_frames_is_rejected(self):
        result = run_user_program(FRAME_WALK, [2, 1])
        assert not result.ok
        assert result.error.kind == "policy"
        assert len(result.trace) == 1

    def test_syntax_error(self):
        result = run_user_program("def custom_sort(arr)\n    pass\n", [2, 1])
        assert result.error.kind == "syntax"

    def test_unlisted_builtin_is_unavailable(self):
        source = "def custom_sort(arr):\n    chr(65)\n"
        result = run_user_program(source, [2, 1])
        assert result.error.error_type == "NameError"
        assert result.error.line == 2

    def test_infinite_loop_hits_line_budget(self):
        config = SandboxConfig(max_line_events=500)
        result = run_user_program(INFINITE_LOOP, [2, 1], config)
        assert result.error.kind == "budget"
        assert "500" in result.error.message

    def test_budget_cannot_be_swallowed(self):
        config = SandboxConfig(max_line_events=500)
        result = run_user_program(SWALLOWING_LOOP, [2, 1], config)
        assert result.error.kind == "budget"

    def test_step_limit(self):
        config = SandboxConfig(step_limit=5)
        result = run_user_program(INSTRUMENTED_TEMPLATE, list(range(10, 0, -1)), config)
        assert result.error.kind == "budget"
        assert result.error.error_type == "StepLimitExceeded"
        assert len(result.trace) == 5

    def test_huge_range_is_refused(self):
        source = "def custom_sort(arr):\n    for i in range(10000000):\n        pass\n"
        result = run_user_program(source, [2, 1])
        assert result.error.kind == "runtime"
        assert "range" in result.error.message

    def test_error_is_user_code_error(self):
        error = run_user_program(COMPARE_THEN_RAISE, [2, 1]).error
        assert isinstance(error, UserCodeError)
        assert error.to_dict() == {
            "kind": "runtime",
            "message": "boom",
            "error_type": "ValueError",
            "line": 3,
        }
        assert str(error) == "[runtime] ValueError: boom (line 3)"


class TestUninstrumented:
    def test_template_produces_two_steps(self):
        result = run_user_program(PLAIN_TEMPLATE, [5, 3, 8, 1], PLAIN)
        assert result.ok
        trace = result.trace
        assert len(trace) == 2
        assert trace[0].values == [5, 3, 8, 1]
        assert trace[1].values == [1, 3, 5, 8]
        assert trace[1].states == [ElementState.SORTED] * 4
        assert trace[1].sorted_indices == (0, 1, 2, 3)
        assert trace.final_values == (1, 3, 5, 8)

    def test_ids_follow_values(self):
        trace = run_user_program(PLAIN_TEMPLATE, [5, 3, 8, 1], PLAIN).trace
        assert [e.id for e in trace[1].snapshot] == ["el-3", "el-1", "el-0", "el-2"]

    def test_marks_only_correct_positions(self):
        source = "def custom_sort(values):\n    return [3, 5, 1, 8]\n"
        trace = run_user_program(source, [5, 3, 8, 1], PLAIN).trace
        assert trace[1].sorted_indices == (3,)
        assert trace[1].states == [
            ElementState.DEFAULT,
            ElementState.DEFAULT,
            ElementState.DEFAULT,
            ElementState.SORTED,
        ]

    def test_converged_when_result_is_sorted(self):
        assert run_user_program(PLAIN_TEMPLATE, [5, 3, 8, 1], PLAIN).trace.converged

    def test_not_converged_when_result_is_unsorted(self):
        source = "def custom_sort(values):\n    return [3, 5, 1, 8]\n"
        result = run_user_program(source, [5, 3, 8, 1], PLAIN)
        assert result.ok
        assert result.trace.converged is False

    def test_works_on_a_copy(self):
        values = [3, 1, 2]
        run_user_program(PLAIN_TEMPLATE, values, PLAIN)
        assert values == [3, 1, 2]

    @pytest.mark.parametrize(
        "body",
        ["return None", "return [1]", "return ['a', 'b']", "values.sort()"],
    )
    def test_malformed_results(self, body):
        source = f"def custom_sort(values):\n    {body}\n"
        result = run_user_program(source, [2, 1], PLAIN)
        assert result.error.kind == "result"
        assert len(result.trace) == 1

    def test_runtime_error(self):
        source = "def custom_sort(values):\n    return values[5]\n"
        result = run_user_program(source, [2, 1], PLAIN)
        assert result.error.error_type == "IndexError"
        assert result.error.line == 2
