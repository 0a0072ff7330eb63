"""Audit every built-in algorithm against a battery of inputs.

For each registered algorithm and each input the script records a trace
and checks the properties every trace must have:

- step indices run 0, 1, 2, ... without gaps;
- the first Step shows the untouched input;
- ``final_values`` is a permutation of the input;
- a converged run leaves ``final_values`` in ascending order;
- swap markers point at distinct positions.

Inputs an algorithm rejects by design (negative values for radix sort,
floats for counting sort, empty input for the distribution sorts) are
reported as "rejected", not as failures.

Usage:
    python scripts/audit_all_algorithms.py [--seed N] [--verbose]
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from collections import Counter

from tracesort.algorithms import SUPPORTED_ALGORITHMS, run_algorithm
from tracesort.errors import InvalidInput
from tracesort.trace_types import Trace

logger = logging.getLogger(__name__)

FIXED_INPUTS: list[list] = [
    [],
    [7],
    [2, 1],
    [5, 3, 8, 1, 9, 2],
    [1, 2, 3, 4, 5],
    [5, 4, 3, 2, 1],
    [4, 4, 1, 4, 1],
    [3.5, -1.25, 0, 2.75],
    [-3, 10, -7, 0, 5],
]


def _problems(trace: Trace, values: list) -> list[str]:
    problems: list[str] = []
    indices = [step.index for step in trace]
    if indices != list(range(len(indices))):
        problems.append("step indices are not sequential")
    if trace.steps and trace.steps[0].values != list(values):
        problems.append("first step does not show the input")
    if Counter(trace.final_values) != Counter(values):
        problems.append("final values are not a permutation of the input")
    if trace.converged and not trace.is_sorted:
        problems.append("converged run left values unsorted")
    for step in trace:
        if step.swap_indices is not None and step.swap_indices[0] == step.swap_indices[1]:
            problems.append(f"step {step.index} swaps a position with itself")
    return problems


def audit(seed: int) -> int:
    rng = random.Random(seed)
    inputs = FIXED_INPUTS + [
        [rng.randint(0, 99) for _ in range(size)] for size in (8, 17, 40, 70)
    ]
    failures = 0
    for name in SUPPORTED_ALGORITHMS:
        rejected = 0
        before = failures
        for values in inputs:
            try:
                trace = run_algorithm(name, values, seed=seed)
            except InvalidInput as exc:
                logger.debug("%s rejected %r: %s", name, values, exc)
                rejected += 1
                continue
            problems = _problems(trace, values)
            for problem in problems:
                print(f"  FAIL {name} {values!r}: {problem}")
            failures += len(problems)
        status = "ok" if failures == before else "FAILED"
        print(f"{name:<18} {status} ({rejected} input(s) rejected)")
    return failures


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    failures = audit(args.seed)
    print(f"\n{failures} failure(s)")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
