"""Primal simplex iterations over a Big-M tableau."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .config import SolverConfig
from .exceptions import PivotError, SolveStatus
from .trace import TableauSnapshot, TraceRecorder

logger = logging.getLogger(__name__)


@dataclass
class EngineResult:
    status: SolveStatus
    iterations: int
    snapshots: List[TableauSnapshot]


class SimplexEngine:
    """Drives a tableau from its starting basis to a terminal state.

    The engine owns ``tableau`` and ``basis`` for the duration of :meth:`run`
    and updates them in place. The last row is the objective row and the last
    column holds the right-hand side.

    If ``idle_column`` is given and the first optimum leaves that variable
    basic at a positive value, the column is charged ``big_m`` once and
    iteration resumes from the current basis (the idle stock pass).
    """

    def __init__(self, tableau: np.ndarray, basis: Sequence[str], variable_names: Sequence[str],
                 config: SolverConfig, idle_column: Optional[int] = None):
        self.tableau = tableau
        self.basis = list(basis)
        self.var_names = list(variable_names)
        self.config = config
        self.idle_column = idle_column
        self.num_constraints = tableau.shape[0] - 1
        self.recorder = TraceRecorder(self.var_names, config.tolerance)
        self._note = None

    def find_pivot_column(self) -> Optional[int]:
        """Most negative objective coefficient; the first one wins ties."""
        obj_row = self.tableau[-1, :-1]
        pivot_col = int(np.argmin(obj_row))
        if obj_row[pivot_col] >= -self.config.tolerance:
            return None
        return pivot_col

    def ratio_test(self, pivot_col: int) -> Tuple[Optional[int], List[Optional[float]]]:
        """Minimum-ratio test.

        Returns the pivot row (lowest index on ties, ``None`` if no row
        qualifies) and the ratio of every constraint row.
        """
        tol = self.config.tolerance
        ratios = []
        pivot_row = None
        min_ratio = None
        for i in range(self.num_constraints):
            coeff = self.tableau[i, pivot_col]
            if coeff <= tol:
                ratios.append(None)
                continue
            rhs = self.tableau[i, -1]
            if abs(rhs) < tol:
                rhs = 0.0
            ratio = rhs / coeff
            ratios.append(float(ratio))
            if ratio < 0:
                continue
            if min_ratio is None or ratio < min_ratio:
                min_ratio = ratio
                pivot_row = i
        return pivot_row, ratios

    def pivot(self, pivot_row: int, pivot_col: int):
        pivot_element = self.tableau[pivot_row, pivot_col]
        if abs(pivot_element) < self.config.pivot_epsilon:
            raise PivotError(
                f"Pivot element {pivot_element!r} at row {pivot_row}, column {pivot_col} is zero"
            )
        self.tableau[pivot_row] /= pivot_element

        for i in range(len(self.tableau)):
            if i != pivot_row:
                multiplier = self.tableau[i, pivot_col]
                self.tableau[i] -= multiplier * self.tableau[pivot_row]

        self.basis[pivot_row] = self.var_names[pivot_col]

    def reprice_idle_stock(self) -> bool:
        """Charge the idle column with M; return True if the objective row changed."""
        col = self.idle_column
        name = self.var_names[col]
        self.idle_column = None
        if name not in self.basis:
            return False
        row = self.basis.index(name)
        idle = self.tableau[row, -1]
        if idle <= self.config.tolerance:
            return False

        M = self.config.big_m
        self.tableau[-1, col] += M
        self.tableau[-1] -= M * self.tableau[row]
        self._note = f"Idle stock pass: {idle:,.2f} packets left in {name} are charged M"
        logger.info("Repricing %s with M to hand out %.6g idle units", name, idle)
        return True

    def run(self) -> EngineResult:
        iteration = 0
        while True:
            pivot_col = self.find_pivot_column()
            if pivot_col is None and self.idle_column is not None and self.reprice_idle_stock():
                pivot_col = self.find_pivot_column()
            if pivot_col is None:
                self.recorder.record(
                    iteration, self.tableau, self.basis,
                    "Optimal: no negative coefficient remains in the objective row",
                    is_optimal=True, status=SolveStatus.OPTIMAL,
                )
                logger.info("Simplex reached optimality after %d pivot(s)", iteration)
                return EngineResult(SolveStatus.OPTIMAL, iteration, self.recorder.snapshots)

            entering = self.var_names[pivot_col]
            pivot_row, ratios = self.ratio_test(pivot_col)
            if pivot_row is None:
                self.recorder.record(
                    iteration, self.tableau, self.basis,
                    f"Unbounded: column {entering} has no positive entry to limit it",
                    entering=entering, pivot_column=pivot_col, ratios=ratios,
                    status=SolveStatus.UNBOUNDED,
                )
                logger.warning("Problem is unbounded in direction of %s", entering)
                return EngineResult(SolveStatus.UNBOUNDED, iteration, self.recorder.snapshots)

            if iteration >= self.config.max_iterations:
                self.recorder.record(
                    iteration, self.tableau, self.basis,
                    f"Stopped: iteration limit of {self.config.max_iterations} reached "
                    "before optimality",
                    status=SolveStatus.NON_CONVERGENCE,
                )
                logger.warning(
                    "Simplex did not converge within %d iterations", self.config.max_iterations
                )
                return EngineResult(SolveStatus.NON_CONVERGENCE, iteration, self.recorder.snapshots)

            leaving = self.basis[pivot_row]
            pivot_element = float(self.tableau[pivot_row, pivot_col])
            if iteration == 0:
                description = (
                    "Initial tableau: artificial variables enter the basis with penalty M; "
                    f"{entering} enters, {leaving} leaves"
                )
            else:
                description = (
                    f"Iteration {iteration}: {entering} enters the basis, {leaving} leaves. "
                    f"Pivot element = {pivot_element:.2f}"
                )
            if self._note:
                description = f"{self._note}. {description}"
                self._note = None
            self.recorder.record(
                iteration, self.tableau, self.basis, description,
                entering=entering, leaving=leaving,
                pivot_row=pivot_row, pivot_column=pivot_col,
                pivot_element=pivot_element, ratios=ratios,
            )
            logger.debug(
                "Pivot %d: %s enters, %s leaves at (%d, %d), element %.6g",
                iteration, entering, leaving, pivot_row, pivot_col, pivot_element,
            )

            try:
                self.pivot(pivot_row, pivot_col)
            except PivotError as exc:
                self.recorder.record(
                    iteration, self.tableau, self.basis, f"Stopped: {exc}",
                    status=SolveStatus.NON_CONVERGENCE,
                )
                logger.warning("Pivoting broke down: %s", exc)
                return EngineResult(SolveStatus.NON_CONVERGENCE, iteration, self.recorder.snapshots)
            iteration += 1
