"""Tests for the pure trace data types."""

from tracesort.run_types import SandboxConfig, SandboxMode, TraceStats
from tracesort.trace_types import Element, ElementState, Step, Trace


def _step(index=0, values=(1, 2), **markers):
    snapshot = tuple(Element(v, f"el-{i}") for i, v in enumerate(values))
    return Step(index=index, snapshot=snapshot, description="d", **markers)


class TestStep:
    def test_snapshot_is_copied_on_construction(self):
        original = Element(4, "el-0", ElementState.COMPARING)
        step = Step(index=0, snapshot=(original,), description="d")
        assert step.snapshot[0] == original
        assert step.snapshot[0] is not original

    def test_snapshot_accepts_list(self):
        step = Step(index=0, snapshot=[Element(1, "a")], description="d")
        assert isinstance(step.snapshot, tuple)

    def test_values_and_states(self):
        step = _step(values=(3, 1))
        assert step.values == [3, 1]
        assert step.states == [ElementState.DEFAULT, ElementState.DEFAULT]

    def test_to_dict_omits_absent_markers(self):
        d = _step().to_dict()
        assert set(d) == {"index", "snapshot", "description"}
        assert d["snapshot"][0] == {"value": 1, "id": "el-0", "state": "default"}

    def test_to_dict_includes_markers(self):
        d = _step(compare_indices=(0, 1), sorted_indices=(1,)).to_dict()
        assert d["compare_indices"] == [0, 1]
        assert d["sorted_indices"] == [1]
        assert "swap_indices" not in d


class TestTrace:
    def test_sequence_protocol(self):
        steps = (_step(0), _step(1))
        trace = Trace(algorithm="x", steps=steps, final_values=(1, 2))
        assert len(trace) == 2
        assert list(trace) == list(steps)
        assert trace[1].index == 1
        assert trace.last.index == 1

    def test_last_of_empty_trace(self):
        assert Trace(algorithm="x").last is None

    def test_is_sorted_uses_final_values(self):
        assert Trace(algorithm="x", final_values=(1, 1, 2)).is_sorted
        assert not Trace(algorithm="x", final_values=(2, 1)).is_sorted

    def test_to_dict(self):
        trace = Trace(
            algorithm="Bubble Sort",
            steps=(_step(0),),
            final_values=(1, 2),
            converged=False,
            stats=TraceStats(comparisons=1, steps=1),
        )
        d = trace.to_dict()
        assert d["algorithm"] == "Bubble Sort"
        assert d["converged"] is False
        assert d["complete"] is True
        assert d["final_values"] == [1, 2]
        assert d["stats"] == {"comparisons": 1, "swaps": 0, "writes": 0, "steps": 1}
        assert len(d["steps"]) == 1


class TestRunTypes:
    def test_stats_report(self):
        stats = TraceStats(comparisons=3, swaps=2, writes=1, steps=9)
        assert stats.report() == "9 steps: 3 comparisons, 2 swaps, 1 writes"

    def test_sandbox_config_defaults(self):
        config = SandboxConfig()
        assert config.mode == SandboxMode.INSTRUMENTED
        assert config.entry_point == "custom_sort"
        assert config.max_line_events > 0
        assert config.step_limit > 0

    def test_mode_values(self):
        assert SandboxMode("uninstrumented") is SandboxMode.UNINSTRUMENTED
