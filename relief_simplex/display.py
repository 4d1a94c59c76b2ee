"""pandas views of snapshots and allocations for the presentation layer."""

from typing import Optional

import pandas as pd

from .allocator import ClosedFormAllocation
from .config import DEFAULT_CONFIG, SolverConfig
from .extract import SolutionReport
from .model import ProblemInstance
from .trace import TableauSnapshot

NOT_APPLICABLE = "-"
ALLOCATION_COLUMNS = ["site", "minimum_requirement", "allocated", "shortfall", "unit_cost", "cost"]


def format_value(value: float, config: Optional[SolverConfig] = None) -> str:
    """Render a tableau entry; Big-M sized values collapse to ``M``."""
    config = config or DEFAULT_CONFIG
    if abs(value) > config.display_threshold:
        return "M" if value > 0 else "-M"
    if abs(value) < config.tolerance:
        return "0"
    return f"{value:.2f}"


def tableau_frame(snapshot: TableauSnapshot) -> pd.DataFrame:
    """Create a pandas DataFrame from a snapshot, one row per basic variable plus Z."""
    columns = list(snapshot.variable_names) + ["RHS"]
    index = list(snapshot.basis) + ["Z"]
    df = pd.DataFrame(snapshot.tableau, columns=columns, index=index)
    if snapshot.ratios is not None:
        df["Ratio"] = list(snapshot.ratios) + [None]
    return df


def formatted_tableau_frame(snapshot: TableauSnapshot,
                            config: Optional[SolverConfig] = None) -> pd.DataFrame:
    df = tableau_frame(snapshot)
    ratios = df.pop("Ratio") if "Ratio" in df else None
    df = df.apply(lambda column: column.map(lambda v: format_value(v, config)))
    if ratios is not None:
        cells = [NOT_APPLICABLE if r is None or pd.isna(r) else f"{r:.2f}" for r in ratios]
        cells[-1] = ""
        df["Ratio"] = cells
    return df


def _allocation_rows(problem, per_site_allocation, per_site_shortfall):
    rows = []
    for site in problem.sites:
        allocated = per_site_allocation.get(site.identifier, 0.0)
        rows.append(
            {
                "site": site.name,
                "minimum_requirement": site.minimum_requirement,
                "allocated": allocated,
                "shortfall": per_site_shortfall.get(site.identifier, 0.0),
                "unit_cost": site.unit_cost,
                "cost": allocated * site.unit_cost,
            }
        )
    return pd.DataFrame(rows, columns=ALLOCATION_COLUMNS)


def allocation_frame(problem: ProblemInstance, report: SolutionReport) -> pd.DataFrame:
    return _allocation_rows(problem, report.per_site_allocation, report.per_site_shortfall)


def closed_form_frame(problem: ProblemInstance, allocation: ClosedFormAllocation) -> pd.DataFrame:
    """Same layout as :func:`allocation_frame`, for the closed-form allocator."""
    return _allocation_rows(problem, allocation.per_site_allocation, allocation.per_site_shortfall)
