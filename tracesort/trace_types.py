"""Trace data types for step-by-step replay of a sorting run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Union

from . import constants
from .run_types import TraceStats

Number = Union[int, float]


class ElementState(str, Enum):
    DEFAULT = constants.STATE_DEFAULT
    COMPARING = constants.STATE_COMPARING
    SWAPPING = constants.STATE_SWAPPING
    SORTED = constants.STATE_SORTED


@dataclass(frozen=True)
class Element:
    """One value of the sequence with its stable identity and display state."""

    value: Number
    id: str
    state: ElementState = ElementState.DEFAULT

    def to_dict(self) -> dict:
        return {"value": self.value, "id": self.id, "state": self.state.value}


@dataclass(frozen=True)
class Step:
    """A single recorded snapshot of the sequence.

    The snapshot is copied element by element when the Step is built, so no
    two Steps ever share an Element object and later mutation of the live
    sequence cannot leak into a recorded Step.
    """

    index: int
    snapshot: tuple[Element, ...]
    description: str
    compare_indices: tuple[int, int] | None = None
    swap_indices: tuple[int, int] | None = None
    sorted_indices: tuple[int, ...] | None = None

    def __post_init__(self):
        object.__setattr__(
            self,
            "snapshot",
            tuple(Element(e.value, e.id, e.state) for e in self.snapshot),
        )

    @property
    def values(self) -> list[Number]:
        return [e.value for e in self.snapshot]

    @property
    def states(self) -> list[ElementState]:
        return [e.state for e in self.snapshot]

    def to_dict(self) -> dict:
        d: dict = {
            "index": self.index,
            "snapshot": [e.to_dict() for e in self.snapshot],
            "description": self.description,
        }
        if self.compare_indices is not None:
            d["compare_indices"] = list(self.compare_indices)
        if self.swap_indices is not None:
            d["swap_indices"] = list(self.swap_indices)
        if self.sorted_indices is not None:
            d["sorted_indices"] = list(self.sorted_indices)
        return d


@dataclass(frozen=True)
class Trace:
    """Complete, immutable record of one algorithm run against one input.

    ``final_values`` is the real state of the sequence when the run ended.
    The trailing Step of a complete trace marks every element sorted whether
    or not the run achieved that, so correctness checks must look at
    ``final_values`` and ``converged`` instead of the last Step's states.
    """

    algorithm: str
    steps: tuple[Step, ...] = ()
    final_values: tuple[Number, ...] = ()
    converged: bool = True
    complete: bool = True
    stats: TraceStats = field(default_factory=TraceStats)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)

    def __getitem__(self, index: int) -> Step:
        return self.steps[index]

    @property
    def last(self) -> Step | None:
        return self.steps[-1] if self.steps else None

    @property
    def is_sorted(self) -> bool:
        """True when the real final values are in ascending order."""
        return all(
            a <= b for a, b in zip(self.final_values, self.final_values[1:])
        )

    def to_dict(self) -> dict:
        return {
            "algorithm": self.algorithm,
            "converged": self.converged,
            "complete": self.complete,
            "final_values": list(self.final_values),
            "stats": self.stats.to_dict(),
            "steps": [s.to_dict() for s in self.steps],
        }
