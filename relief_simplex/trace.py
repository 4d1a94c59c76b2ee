"""Immutable tableau snapshots taken while the simplex engine runs."""

from dataclasses import dataclass, fields
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .exceptions import SolveStatus


@dataclass(frozen=True, eq=False)
class TableauSnapshot:
    """One frame of the iteration history.

    ``tableau`` is a read-only copy with values below the tolerance set to
    exactly zero. ``ratios`` holds one entry per constraint row, ``None``
    where the entering column is not positive. ``status`` is only set on the
    terminal frame.
    """

    iteration: int
    tableau: np.ndarray
    basis: Tuple[str, ...]
    variable_names: Tuple[str, ...]
    description: str
    entering: Optional[str] = None
    leaving: Optional[str] = None
    pivot_row: Optional[int] = None
    pivot_column: Optional[int] = None
    pivot_element: Optional[float] = None
    ratios: Optional[Tuple[Optional[float], ...]] = None
    is_optimal: bool = False
    status: Optional[SolveStatus] = None

    @property
    def objective_value(self) -> float:
        return float(self.tableau[-1, -1])

    @property
    def non_basic(self) -> Tuple[str, ...]:
        return tuple(name for name in self.variable_names if name not in self.basis)

    @property
    def is_terminal(self) -> bool:
        return self.status is not None

    def _key(self):
        return tuple(getattr(self, f.name) for f in fields(self) if f.name != "tableau")

    def __eq__(self, other):
        if not isinstance(other, TableauSnapshot):
            return NotImplemented
        return self._key() == other._key() and np.array_equal(self.tableau, other.tableau)

    def __hash__(self):
        return hash((self._key(), self.tableau.shape, self.tableau.tobytes()))


def clean(values: np.ndarray, tolerance: float) -> np.ndarray:
    cleaned = np.array(values, dtype=float, copy=True)
    cleaned[np.abs(cleaned) < tolerance] = 0.0
    return cleaned


def record_snapshot(
    iteration: int,
    tableau: np.ndarray,
    basis: Sequence[str],
    variable_names: Sequence[str],
    description: str,
    tolerance: float,
    **pivot_info,
) -> TableauSnapshot:
    frozen = clean(tableau, tolerance)
    frozen.flags.writeable = False
    ratios = pivot_info.pop("ratios", None)
    if ratios is not None:
        ratios = tuple(ratios)
    return TableauSnapshot(
        iteration=iteration,
        tableau=frozen,
        basis=tuple(basis),
        variable_names=tuple(variable_names),
        description=description,
        ratios=ratios,
        **pivot_info,
    )


class TraceRecorder:
    """Collects the snapshots of a single solve, in iteration order."""

    def __init__(self, variable_names: Sequence[str], tolerance: float):
        self.variable_names = tuple(variable_names)
        self.tolerance = tolerance
        self.snapshots: List[TableauSnapshot] = []

    def record(self, iteration, tableau, basis, description, **pivot_info):
        snapshot = record_snapshot(
            iteration,
            tableau,
            basis,
            self.variable_names,
            description,
            self.tolerance,
            **pivot_info,
        )
        self.snapshots.append(snapshot)
        return snapshot

    def __len__(self):
        return len(self.snapshots)
