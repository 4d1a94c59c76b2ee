"""Read a final tableau back into a per-site allocation report."""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import numpy as np

from .config import SolverConfig
from .exceptions import SolveStatus
from .model import ProblemInstance
from .standard_form import SLACK_NAME, is_artificial
from .trace import TableauSnapshot


@dataclass(frozen=True)
class SolutionReport:
    """Outcome of a solve.

    ``total_cost`` is the real distribution cost, recomputed from the
    allocations. ``penalty_cost`` is ``M`` times the residual artificial
    values; it is a diagnostic of how far the instance is from feasible and
    is never added to ``total_cost``.
    """

    status: SolveStatus
    message: str
    per_site_allocation: Dict[str, float] = field(default_factory=dict)
    per_site_artificial: Dict[str, float] = field(default_factory=dict)
    per_site_shortfall: Dict[str, float] = field(default_factory=dict)
    total_cost: float = 0.0
    penalty_cost: float = 0.0
    total_allocated: float = 0.0
    idle_stock: float = 0.0
    is_feasible: bool = False
    iterations: int = 0
    snapshots: Sequence[TableauSnapshot] = ()

    @property
    def final_snapshot(self):
        return self.snapshots[-1] if self.snapshots else None


def basic_values(tableau: np.ndarray, basis: Sequence[str], variable_names: Sequence[str]):
    """Value of every variable: ``max(0, RHS)`` for basic ones, 0 otherwise."""
    values = {name: 0.0 for name in variable_names}
    for i, name in enumerate(basis):
        values[name] = max(0.0, float(tableau[i, -1]))
    return values


def _message(status, problem, is_feasible, total_cost, idle_stock, iterations):
    if status is SolveStatus.UNBOUNDED:
        return "The problem is unbounded; the trace stops at the last pivot attempted."
    if status is SolveStatus.NON_CONVERGENCE:
        return (
            f"The simplex method did not converge (stopped after {iterations} pivots); "
            "the allocation shown is the last basis reached."
        )
    if not is_feasible:
        return (
            f"No feasible allocation: available stock ({problem.total_capacity:,.0f} packets) is "
            f"below the total minimum requirement ({problem.total_minimum_requirement:,.0f} "
            "packets). Artificial variables show the shortfall at each site."
        )
    message = f"Optimal feasible allocation found with minimum total cost {total_cost:,.2f}."
    if idle_stock > 0:
        message += f" {idle_stock:,.0f} packets remain in stock."
    return message


def extract_solution(
    tableau: np.ndarray,
    basis: Sequence[str],
    variable_names: Sequence[str],
    problem: ProblemInstance,
    config: SolverConfig,
    status: SolveStatus,
    snapshots: List[TableauSnapshot],
    iterations: int,
) -> SolutionReport:
    values = basic_values(tableau, basis, variable_names)
    tol = config.tolerance

    allocation = {}
    artificial = {}
    shortfall = {}
    total_cost = 0.0
    for i, site in enumerate(problem.sites):
        x = values[f"x{i + 1}"]
        a = values[f"A{i + 1}"]
        x = 0.0 if abs(x) < tol else x
        a = 0.0 if abs(a) < tol else a
        allocation[site.identifier] = x
        artificial[site.identifier] = a
        shortfall[site.identifier] = max(0.0, site.minimum_requirement - x)
        total_cost += x * site.unit_cost

    is_feasible = all(
        value <= tol for name, value in values.items() if is_artificial(name)
    )
    if status is SolveStatus.OPTIMAL and not is_feasible:
        status = SolveStatus.INFEASIBLE

    idle_stock = values[SLACK_NAME]
    idle_stock = 0.0 if idle_stock < tol else idle_stock

    return SolutionReport(
        status=status,
        message=_message(status, problem, is_feasible, total_cost, idle_stock, iterations),
        per_site_allocation=allocation,
        per_site_artificial=artificial,
        per_site_shortfall=shortfall,
        total_cost=total_cost,
        penalty_cost=config.big_m * sum(artificial.values()),
        total_allocated=sum(allocation.values()),
        idle_stock=idle_stock,
        is_feasible=is_feasible,
        iterations=iterations,
        snapshots=tuple(snapshots),
    )
