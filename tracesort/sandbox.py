"""Sandboxed execution of caller-supplied sorting programs.

A caller program is Python source defining one entry function. It runs
in-process inside a restricted environment:

1. the source is vetted by :class:`~tracesort.policy.SourcePolicy`;
2. it executes against an allow-list of builtins;
3. a ``sys.settrace`` line counter confined to caller frames enforces a
   line budget and a wall-clock deadline;
4. the container refuses to record more than ``step_limit`` Steps.

Every failure of the caller's code is converted to a :class:`UserCodeError`
at this boundary and returned with whatever trace was recorded so far.
"""

from __future__ import annotations

import logging
import math
import sys
import time
from collections import defaultdict, deque
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Sequence, Union

from pydantic import BaseModel, StrictFloat, StrictInt, ValidationError

from . import constants
from .container import TraceableContainer
from .errors import StepLimitExceeded, UserCodeError
from .policy import SourcePolicy
from .run_types import SandboxConfig, SandboxMode, TraceStats
from .trace_types import Element, ElementState, Number, Step, Trace

logger = logging.getLogger(__name__)


INSTRUMENTED_TEMPLATE = '''\
def custom_sort(arr):
    # arr records a step for every compare, swap, set and mark_sorted call:
    #   arr.get(i), arr.set(i, value), arr.length()
    #   arr.compare(i, j)  -> -1, 0 or 1
    #   arr.swap(i, j), arr.mark_sorted(i), arr.mark_range_sorted(start, end)
    #   arr.set_next_description("text for the next step")
    n = arr.length()
    for i in range(n - 1):
        for j in range(n - i - 1):
            if arr.compare(j, j + 1) > 0:
                arr.swap(j, j + 1)
        arr.mark_sorted(n - 1 - i)
    if n:
        arr.mark_sorted(0)
'''

PLAIN_TEMPLATE = '''\
def custom_sort(values):
    # values is a plain list; return the sorted list.
    # Only the initial and final states are recorded.
    n = len(values)
    for i in range(n - 1):
        for j in range(n - i - 1):
            if values[j] > values[j + 1]:
                values[j], values[j + 1] = values[j + 1], values[j]
    return values
'''


# ── Caller-facing handle ─────────────────────────────────────────


class ContainerHandle:
    """The only object instrumented caller code can touch.

    It forwards exactly the recording operations of the container; the
    backing sequence is reachable only through a private slot, and the
    source policy rejects every private attribute access.
    """

    __slots__ = ("_container",)

    def __init__(self, container: TraceableContainer):
        self._container = container

    def get(self, i):
        return self._container.get(i)

    def set(self, i, value):
        self._container.set(i, value)

    def compare(self, i, j):
        return self._container.compare(i, j)

    def swap(self, i, j):
        self._container.swap(i, j)

    def mark_sorted(self, i):
        self._container.mark_sorted(i)

    def mark_range_sorted(self, start, end):
        self._container.mark_range_sorted(start, end)

    def set_next_description(self, text):
        self._container.set_next_description(text)

    def length(self):
        return self._container.length()

    def __len__(self):
        return self._container.length()

    def __repr__(self):
        return f"<ContainerHandle length={self._container.length()}>"


# ── Restricted builtins ──────────────────────────────────────────


def _capped_range(*args):
    r = range(*args)
    if len(r) > constants.MAX_RANGE_LENGTH:
        raise ValueError(
            f"range of length {len(r)} exceeds the limit of {constants.MAX_RANGE_LENGTH}"
        )
    return r


def _logged_print(*args, **kwargs) -> None:
    logger.debug("caller print: %s", " ".join(str(a) for a in args))


_SAFE_BUILTINS: dict[str, Any] = {
    "len": len,
    "range": _capped_range,
    "min": min,
    "max": max,
    "abs": abs,
    "int": int,
    "float": float,
    "bool": bool,
    "str": str,
    "list": list,
    "tuple": tuple,
    "dict": dict,
    "set": set,
    "enumerate": enumerate,
    "zip": zip,
    "reversed": reversed,
    "sorted": sorted,
    "sum": sum,
    "any": any,
    "all": all,
    "round": round,
    "divmod": divmod,
    "isinstance": isinstance,
    "print": _logged_print,
    "Exception": Exception,
    "ValueError": ValueError,
    "IndexError": IndexError,
    "KeyError": KeyError,
    "TypeError": TypeError,
    "RuntimeError": RuntimeError,
    "ZeroDivisionError": ZeroDivisionError,
    "AssertionError": AssertionError,
    "StopIteration": StopIteration,
}


# ── Execution budget ─────────────────────────────────────────────


class _BudgetExhausted(BaseException):
    """Raised inside caller frames when the execution budget runs out.

    Derives from BaseException so ``except Exception`` in caller code
    cannot swallow it.
    """

    pass


class ExecutionBudget:
    """Counts line events in caller frames and enforces a deadline."""

    def __init__(self, max_line_events: int, timeout_seconds: float):
        self.max_line_events = max_line_events
        self.timeout_seconds = timeout_seconds
        self.line_events = 0
        self._deadline = 0.0

    def _global_trace(self, frame, event, arg):
        if frame.f_code.co_filename != constants.USER_FILENAME:
            return None
        return self._local_trace

    def _local_trace(self, frame, event, arg):
        if event == "line":
            self.line_events += 1
            if self.line_events > self.max_line_events:
                raise _BudgetExhausted(
                    f"exceeded the budget of {self.max_line_events} executed lines"
                )
            if time.monotonic() > self._deadline:
                raise _BudgetExhausted(
                    f"exceeded the time limit of {self.timeout_seconds}s"
                )
        return self._local_trace

    @contextmanager
    def armed(self) -> Iterator[ExecutionBudget]:
        previous = sys.gettrace()
        self._deadline = time.monotonic() + self.timeout_seconds
        sys.settrace(self._global_trace)
        try:
            yield self
        finally:
            sys.settrace(previous)


# ── Result types ─────────────────────────────────────────────────


class PlainSortOutput(BaseModel):
    """Shape of the value an uninstrumented entry function must return."""

    values: list[Union[StrictInt, StrictFloat]]


@dataclass(frozen=True)
class SandboxResult:
    """Outcome of one caller program run: a trace, plus the error if it failed."""

    trace: Trace
    error: UserCodeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, trace: Trace) -> SandboxResult:
        return cls(trace=trace)

    @classmethod
    def failure(cls, trace: Trace, error: UserCodeError) -> SandboxResult:
        return cls(trace=trace, error=error)


# ── Entry point ──────────────────────────────────────────────────


def run_user_program(
    source: str,
    values: Sequence[Number],
    config: SandboxConfig = SandboxConfig(),
    policy: SourcePolicy | None = None,
) -> SandboxResult:
    """Run caller-supplied sorting logic and return its trace.

    Args:
        source: Python source defining ``config.entry_point``.
        values: Input sequence; never mutated.
        config: Mode and execution limits.
        policy: Source policy; a default tree-sitter policy when omitted.

    Returns:
        A SandboxResult. Caller failures never raise; they are reported in
        ``result.error`` next to the partial trace.
    """
    mode = SandboxMode(config.mode)
    logger.info(
        "run_user_program: mode=%s, entry=%s, n=%d",
        mode.value,
        config.entry_point,
        len(values),
    )
    if mode == SandboxMode.INSTRUMENTED:
        return _run_instrumented(source, values, config, policy or SourcePolicy())
    return _run_uninstrumented(source, values, config, policy or SourcePolicy())


def _run_instrumented(
    source: str,
    values: Sequence[Number],
    config: SandboxConfig,
    policy: SourcePolicy,
) -> SandboxResult:
    container = TraceableContainer(
        values,
        label=f"{constants.DEFAULT_LABEL} ({SandboxMode.INSTRUMENTED.value})",
        step_limit=config.step_limit,
    )
    outcome = _execute(source, ContainerHandle(container), config, policy)
    if isinstance(outcome, UserCodeError):
        return _failed(container.partial_trace(), outcome)
    return SandboxResult.success(container.get_trace())


def _run_uninstrumented(
    source: str,
    values: Sequence[Number],
    config: SandboxConfig,
    policy: SourcePolicy,
) -> SandboxResult:
    # The container only validates the input and assigns ids here.
    label = f"{constants.DEFAULT_LABEL} ({SandboxMode.UNINSTRUMENTED.value})"
    container = TraceableContainer(values, label=label)
    initial_trace = container.partial_trace()
    initial = initial_trace.steps[0]

    outcome = _execute(source, list(values), config, policy)
    if isinstance(outcome, UserCodeError):
        return _failed(initial_trace, outcome)

    try:
        result = _validate_plain_output(outcome, len(values))
    except UserCodeError as error:
        return _failed(initial_trace, error)

    ascending = sorted(values)
    final = _final_plain_step(initial, result, ascending)
    trace = Trace(
        algorithm=label,
        steps=(initial, final),
        final_values=tuple(result),
        converged=list(result) == ascending,
        stats=TraceStats(steps=2),
    )
    return SandboxResult.success(trace)


def _failed(trace: Trace, error: UserCodeError) -> SandboxResult:
    logger.warning("Caller program failed: %s", error)
    error.trace = trace
    return SandboxResult.failure(trace, error)


def _execute(
    source: str,
    argument: Any,
    config: SandboxConfig,
    policy: SourcePolicy,
) -> Any:
    """Vet, compile and run the entry function; return its result or a UserCodeError."""
    violations = policy.check(source)
    if violations:
        first = violations[0]
        return UserCodeError(first.message, kind=first.kind, line=first.line)

    try:
        code = compile(source, constants.USER_FILENAME, "exec")
    except SyntaxError as exc:
        return UserCodeError(
            exc.msg or "invalid syntax",
            kind="syntax",
            error_type="SyntaxError",
            line=exc.lineno,
        )

    namespace: dict[str, Any] = {"__builtins__": dict(_SAFE_BUILTINS)}
    budget = ExecutionBudget(config.max_line_events, config.timeout_seconds)
    try:
        with budget.armed():
            exec(code, namespace)
            entry = namespace.get(config.entry_point)
            if not callable(entry):
                return UserCodeError(
                    f"Program must define a function named '{config.entry_point}'",
                    kind="entry",
                )
            return entry(argument)
    except _BudgetExhausted as exc:
        return UserCodeError(str(exc), kind="budget", line=_user_line(exc))
    except StepLimitExceeded as exc:
        return UserCodeError(
            str(exc), kind="budget", error_type=type(exc).__name__, line=_user_line(exc)
        )
    except Exception as exc:
        return UserCodeError(
            str(exc) or type(exc).__name__,
            kind="runtime",
            error_type=type(exc).__name__,
            line=_user_line(exc),
        )
    finally:
        logger.debug("Caller program used %d line events", budget.line_events)


def _user_line(exc: BaseException) -> int | None:
    """Line of the innermost caller frame in *exc*'s traceback."""
    line = None
    tb = exc.__traceback__
    while tb is not None:
        if tb.tb_frame.f_code.co_filename == constants.USER_FILENAME:
            line = tb.tb_lineno
        tb = tb.tb_next
    return line


def _validate_plain_output(result: Any, expected_length: int) -> list[Number]:
    if result is None:
        raise UserCodeError(
            "Entry function returned None; expected a sequence of numbers",
            kind="result",
        )
    try:
        output = PlainSortOutput(values=result)
    except ValidationError as exc:
        first = exc.errors()[0]
        raise UserCodeError(
            f"Entry function returned a malformed result: {first['msg']}",
            kind="result",
            error_type="ValidationError",
        ) from None
    if any(isinstance(v, float) and math.isnan(v) for v in output.values):
        raise UserCodeError("Entry function returned NaN", kind="result")
    if len(output.values) != expected_length:
        raise UserCodeError(
            f"Entry function returned {len(output.values)} values,"
            f" expected {expected_length}",
            kind="result",
        )
    return output.values


def _final_plain_step(
    initial: Step, result: list[Number], ascending: list[Number]
) -> Step:
    """Snapshot of the returned values; a position is sorted only if it holds
    the value the ascending order puts there."""
    free_ids: dict[Number, deque[str]] = defaultdict(deque)
    for el in initial.snapshot:
        free_ids[el.value].append(el.id)
    used: set[str] = set()
    ids: list[str | None] = []
    for value in result:
        if free_ids[value]:
            ident = free_ids[value].popleft()
            used.add(ident)
            ids.append(ident)
        else:
            ids.append(None)
    leftovers = deque(el.id for el in initial.snapshot if el.id not in used)
    ids = [ident if ident is not None else leftovers.popleft() for ident in ids]

    sorted_positions = tuple(
        k for k, (got, want) in enumerate(zip(result, ascending)) if got == want
    )
    snapshot = tuple(
        Element(
            value=value,
            id=ident,
            state=ElementState.SORTED if k in sorted_positions else ElementState.DEFAULT,
        )
        for k, (value, ident) in enumerate(zip(result, ids))
    )
    correct = len(sorted_positions)
    return Step(
        index=1,
        snapshot=snapshot,
        description=(
            f"Custom algorithm returned; {correct} of {len(result)}"
            " elements are in their sorted position"
        ),
        sorted_indices=sorted_positions,
    )
