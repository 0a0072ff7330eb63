"""tracesort command line: record a sorting trace and print it."""

from __future__ import annotations

import argparse
import logging
import math
import random
import sys
from typing import Optional, Sequence

from .algorithms import SUPPORTED_ALGORITHMS
from .api import (
    dump_trace,
    list_algorithms,
    trace_algorithm,
    trace_to_json,
    trace_user_program,
)
from .errors import TraceError
from .run_types import SandboxMode
from .trace_types import Number, Trace
from . import constants

logger = logging.getLogger(__name__)

_DEFAULT_VALUES = "5,3,8,1,9,2"
_RANDOM_VALUE_CEILING = 100


def _parse_values(text: str) -> list[Number]:
    values: list[Number] = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            values.append(int(part))
        except ValueError:
            try:
                value = float(part)
            except ValueError:
                raise argparse.ArgumentTypeError(f"not a number: {part!r}") from None
            if math.isnan(value):
                raise argparse.ArgumentTypeError(f"not a number: {part!r}")
            values.append(value)
    return values


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tracesort",
        description="Record a step-by-step trace of a sorting algorithm",
    )
    parser.add_argument("--list", action="store_true",
                        help="List the built-in algorithms and exit")
    parser.add_argument("--algorithm", "-a", default="bubble-sort",
                        choices=SUPPORTED_ALGORITHMS,
                        help="Built-in algorithm to trace (default: bubble-sort)")
    parser.add_argument("--values", "-v", type=_parse_values, default=None,
                        help=f"Comma-separated input values (default: {_DEFAULT_VALUES})")
    parser.add_argument("--random", "-r", type=int, default=None, metavar="N",
                        help="Use N random integers instead of --values")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for random input and randomized algorithms")
    parser.add_argument("--program", default=None, metavar="FILE",
                        help="Trace a custom sorting program instead of a built-in")
    parser.add_argument("--mode", default=constants.MODE_INSTRUMENTED,
                        choices=[m.value for m in SandboxMode],
                        help="How the custom program sees the values")
    parser.add_argument("--entry", default=constants.DEFAULT_ENTRY_POINT,
                        help="Entry function of the custom program")
    parser.add_argument("--max-line-events", type=int,
                        default=constants.DEFAULT_MAX_LINE_EVENTS,
                        help="Budget of executed program lines")
    parser.add_argument("--timeout", type=float,
                        default=constants.DEFAULT_TIMEOUT_SECONDS,
                        help="Wall-clock budget for the custom program in seconds")
    parser.add_argument("--json", action="store_true",
                        help="Print the trace as JSON")
    parser.add_argument("--verbose", action="store_true",
                        help="Log every recorded step")
    return parser


def _input_values(args: argparse.Namespace) -> list[Number]:
    if args.random is not None:
        rng = random.Random(args.seed)
        return [rng.randint(1, _RANDOM_VALUE_CEILING) for _ in range(args.random)]
    if args.values is not None:
        return args.values
    return _parse_values(_DEFAULT_VALUES)


def _emit(trace: Trace, as_json: bool) -> None:
    print(trace_to_json(trace) if as_json else dump_trace(trace))


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list:
        for info in list_algorithms():
            print(f"{info.name:<18} {info.family.value:<13} {info.time_complexity:<28} {info.description}")
        return 0

    values = _input_values(args)

    if args.program:
        with open(args.program, encoding="utf-8") as f:
            source = f.read()
        try:
            result = trace_user_program(
                source,
                values,
                mode=args.mode,
                entry_point=args.entry,
                max_line_events=args.max_line_events,
                timeout_seconds=args.timeout,
            )
        except TraceError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        _emit(result.trace, args.json)
        if not result.ok:
            print(f"error: {result.error}", file=sys.stderr)
            return 1
        return 0

    try:
        trace = trace_algorithm(args.algorithm, values, seed=args.seed)
    except TraceError as exc:
        if exc.trace is not None:
            _emit(exc.trace, args.json)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    _emit(trace, args.json)
    return 0


if __name__ == "__main__":
    sys.exit(main())
