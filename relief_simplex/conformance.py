"""Compare the simplex result with the closed-form allocation."""

from dataclasses import dataclass
from typing import List, Optional

from .allocator import ClosedFormAllocation, allocate_closed_form
from .config import DEFAULT_CONFIG, SolverConfig
from .extract import SolutionReport
from .model import ProblemInstance
from .solver import solve


@dataclass(frozen=True)
class CrossCheckResult:
    simplex: SolutionReport
    closed_form: ClosedFormAllocation
    mismatches: List[str]

    @property
    def agrees(self):
        return not self.mismatches


def cross_check(problem: ProblemInstance, config: Optional[SolverConfig] = None,
                rel_tol: float = 1e-9) -> CrossCheckResult:
    """Solve ``problem`` both ways and list every disagreement.

    Costs are compared only when both agree the instance is feasible; in the
    infeasible case the two methods share stock differently by design.
    """
    config = config or DEFAULT_CONFIG
    report = solve(problem, config)
    closed = allocate_closed_form(problem, config)
    mismatches = []

    if report.is_feasible != closed.is_feasible:
        mismatches.append(
            f"feasibility differs: simplex={report.is_feasible}, closed form={closed.is_feasible}"
        )

    tol = config.tolerance
    if abs(report.total_allocated - closed.total_allocated) > tol:
        mismatches.append(
            f"total allocated differs: simplex={report.total_allocated}, "
            f"closed form={closed.total_allocated}"
        )

    if report.is_feasible and closed.is_feasible:
        scale = max(abs(report.total_cost), abs(closed.total_cost), 1.0)
        if abs(report.total_cost - closed.total_cost) > max(tol, rel_tol * scale):
            mismatches.append(
                f"total cost differs: simplex={report.total_cost}, "
                f"closed form={closed.total_cost}"
            )
        for site in problem.sites:
            allocated = report.per_site_allocation.get(site.identifier, 0.0)
            if allocated < site.minimum_requirement - tol:
                mismatches.append(f"{site.name} receives {allocated}, below its minimum")

    return CrossCheckResult(simplex=report, closed_form=closed, mismatches=mismatches)
