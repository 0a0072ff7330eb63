"""Built-in sorting algorithms, each a ``run(values, rng=None) -> Trace`` function."""

from __future__ import annotations

import importlib
import logging
import random
from typing import Sequence

from ..trace_types import Number, Trace
from ._base import AlgorithmFn
from .catalog import ALGORITHM_CATALOG, AlgorithmFamily, AlgorithmInfo

logger = logging.getLogger(__name__)

# Lazy imports to avoid loading every family at startup
_ALGORITHM_FUNCTIONS: dict[str, str] = {
    "bubble-sort": "simple.bubble_sort",
    "selection-sort": "simple.selection_sort",
    "insertion-sort": "simple.insertion_sort",
    "quick-sort": "efficient.quick_sort",
    "merge-sort": "efficient.merge_sort",
    "heap-sort": "efficient.heap_sort",
    "tim-sort": "efficient.tim_sort",
    "shell-sort": "improved.shell_sort",
    "comb-sort": "improved.comb_sort",
    "cocktail-sort": "improved.cocktail_sort",
    "gnome-sort": "novelty.gnome_sort",
    "pancake-sort": "novelty.pancake_sort",
    "counting-sort": "distribution.counting_sort",
    "radix-sort": "distribution.radix_sort",
    "bucket-sort": "distribution.bucket_sort",
    "bogo-sort": "novelty.bogo_sort",
    "miracle-sort": "novelty.miracle_sort",
    "quantum-bogo-sort": "novelty.quantum_bogo_sort",
    "sleep-sort": "novelty.sleep_sort",
}

SUPPORTED_ALGORITHMS: tuple[str, ...] = tuple(_ALGORITHM_FUNCTIONS.keys())


def get_algorithm(name: str) -> AlgorithmFn:
    """Return the run function registered under *name*.

    Raises ``ValueError`` if *name* has no registered algorithm.
    """
    target = _ALGORITHM_FUNCTIONS.get(name)
    if target is None:
        raise ValueError(
            f"Unknown algorithm: {name}. Available: {', '.join(SUPPORTED_ALGORITHMS)}"
        )
    module_name, func_name = target.split(".")
    mod = importlib.import_module(f".{module_name}", package=__package__)
    return getattr(mod, func_name)


def run_algorithm(
    name: str,
    values: Sequence[Number],
    seed: int | None = None,
    rng: random.Random | None = None,
) -> Trace:
    """Run the named algorithm against *values* and return its Trace.

    Args:
        name: Registry name, e.g. "quick-sort".
        values: Input sequence; it is copied, never mutated.
        seed: Seed for a fresh random source when *rng* is not given.
        rng: Random source for randomized algorithms.
    """
    run = get_algorithm(name)
    if rng is None and seed is not None:
        rng = random.Random(seed)
    logger.info("run_algorithm: %s, n=%d, seed=%s", name, len(values), seed)
    return run(values, rng)


__all__ = [
    "ALGORITHM_CATALOG",
    "AlgorithmFamily",
    "AlgorithmInfo",
    "SUPPORTED_ALGORITHMS",
    "get_algorithm",
    "run_algorithm",
]
