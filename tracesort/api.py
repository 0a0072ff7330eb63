"""Composable API functions for recording and exporting sorting traces.

Each function corresponds to a CLI workflow (--algorithm, --program, --list,
--json) but is callable programmatically without argparse.
"""

from __future__ import annotations

import json
import logging
import random
from typing import Optional, Sequence

from .algorithms import ALGORITHM_CATALOG, AlgorithmInfo, run_algorithm
from .run_types import SandboxConfig, SandboxMode
from .sandbox import SandboxResult, run_user_program
from .trace_types import Number, Trace
from . import constants

logger = logging.getLogger(__name__)


def trace_algorithm(
    name: str,
    values: Sequence[Number],
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> Trace:
    """Run a built-in algorithm and return its trace.

    Args:
        name: Registry name such as "merge-sort".
        values: Input sequence; never mutated.
        seed: Seed for the random source of randomized algorithms.
        rng: Explicit random source; takes precedence over *seed*.

    Returns:
        The finished Trace. Adapter errors propagate with ``exc.trace``
        holding the partial trace.
    """
    return run_algorithm(name, values, seed=seed, rng=rng)


def trace_user_program(
    source: str,
    values: Sequence[Number],
    mode: str = constants.MODE_INSTRUMENTED,
    entry_point: str = constants.DEFAULT_ENTRY_POINT,
    max_line_events: int = constants.DEFAULT_MAX_LINE_EVENTS,
    timeout_seconds: float = constants.DEFAULT_TIMEOUT_SECONDS,
    step_limit: int = constants.DEFAULT_TRACE_STEP_LIMIT,
) -> SandboxResult:
    """Run caller-supplied sorting code in the sandbox.

    Args:
        source: Python source defining *entry_point*.
        values: Input sequence.
        mode: "instrumented" or "uninstrumented".
        entry_point: Name of the function to call.
        max_line_events: Budget of executed caller lines.
        timeout_seconds: Wall-clock budget.
        step_limit: Maximum number of recorded Steps.

    Returns:
        A SandboxResult with the trace and, on failure, the UserCodeError.
    """
    config = SandboxConfig(
        mode=SandboxMode(mode),
        entry_point=entry_point,
        max_line_events=max_line_events,
        timeout_seconds=timeout_seconds,
        step_limit=step_limit,
    )
    return run_user_program(source, values, config)


def list_algorithms() -> list[AlgorithmInfo]:
    """Return catalog metadata for every built-in algorithm, in registry order."""
    return list(ALGORITHM_CATALOG.values())


def dump_trace(trace: Trace) -> str:
    """Return a human-readable text dump, one line per Step.

    Args:
        trace: A finished or partial trace.

    Returns:
        The dump, ending with a summary line of the run's stats.
    """
    lines = [f"# {trace.algorithm}"]
    for step in trace:
        values = " ".join(_render_element(e.value, e.state.value) for e in step.snapshot)
        lines.append(f"{step.index:>5}  [{values}]  {step.description}")
    status = "converged" if trace.converged else "did not converge"
    if not trace.complete:
        status += ", partial"
    lines.append(f"# {trace.stats.report()} ({status})")
    return "\n".join(lines)


def trace_to_json(trace: Trace, indent: Optional[int] = 2) -> str:
    """Serialize *trace* to JSON for external renderers."""
    return json.dumps(trace.to_dict(), indent=indent, ensure_ascii=False)


_STATE_MARKERS = {
    constants.STATE_DEFAULT: "",
    constants.STATE_COMPARING: "?",
    constants.STATE_SWAPPING: "~",
    constants.STATE_SORTED: "*",
}


def _render_element(value: Number, state: str) -> str:
    return f"{value}{_STATE_MARKERS[state]}"
