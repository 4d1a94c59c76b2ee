"""Closed-form allocation used to cross-check the simplex result.

When stock covers every minimum, each site gets its minimum and whatever is
left goes to the cheapest site. Otherwise stock is shared in proportion to
the minimum requirements, rounded to whole packets by largest remainder.
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional

from .config import DEFAULT_CONFIG, SolverConfig
from .model import ProblemInstance


@dataclass(frozen=True)
class ClosedFormAllocation:
    per_site_allocation: Dict[str, float]
    per_site_shortfall: Dict[str, float]
    total_cost: float
    penalty_cost: float
    is_feasible: bool
    message: str

    @property
    def total_allocated(self):
        return sum(self.per_site_allocation.values())


def _proportional_shares(problem):
    total_min = problem.total_minimum_requirement
    capacity = problem.total_capacity
    exact = [capacity * site.minimum_requirement / total_min for site in problem.sites]
    shares = [math.floor(value) for value in exact]

    remaining = capacity - sum(shares)
    # Largest fractional part first, earlier sites first on ties
    order = sorted(range(len(exact)), key=lambda i: (-(exact[i] - shares[i]), i))
    for i in order:
        if remaining < 1:
            break
        shares[i] += 1
        remaining -= 1
    if remaining > 0 and order:
        shares[order[0]] += remaining
    return shares


def allocate_closed_form(problem: ProblemInstance,
                         config: Optional[SolverConfig] = None) -> ClosedFormAllocation:
    config = config or DEFAULT_CONFIG
    sites = problem.sites
    if not sites:
        return ClosedFormAllocation({}, {}, 0.0, 0.0, False, "No demand sites were given.")

    is_feasible = problem.is_capacity_sufficient
    if is_feasible:
        shares = [site.minimum_requirement for site in sites]
        remaining = problem.total_capacity - problem.total_minimum_requirement
        if remaining > 0:
            cheapest = min(range(len(sites)), key=lambda i: (sites[i].unit_cost, i))
            shares[cheapest] += remaining
    else:
        shares = _proportional_shares(problem)

    allocation = {site.identifier: float(share) for site, share in zip(sites, shares)}
    shortfall = {
        site.identifier: max(0.0, site.minimum_requirement - allocation[site.identifier])
        for site in sites
    }
    total_cost = sum(allocation[site.identifier] * site.unit_cost for site in sites)
    penalty_cost = config.big_m * sum(shortfall.values())

    if is_feasible:
        message = f"All minimum requirements met. Total cost {total_cost:,.2f}."
    else:
        message = (
            f"Stock ({problem.total_capacity:,.0f}) is below the total minimum requirement "
            f"({problem.total_minimum_requirement:,.0f}); stock shared proportionally."
        )
    return ClosedFormAllocation(
        per_site_allocation=allocation,
        per_site_shortfall=shortfall,
        total_cost=total_cost,
        penalty_cost=penalty_cost,
        is_feasible=is_feasible,
        message=message,
    )
