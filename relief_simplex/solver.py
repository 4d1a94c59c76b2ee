"""Entry point of the Big-M simplex allocation solver."""

import logging
from typing import Optional

from .config import DEFAULT_CONFIG, SolverConfig
from .engine import SimplexEngine
from .exceptions import InputError, SolveStatus
from .extract import SolutionReport, extract_solution
from .model import ProblemInstance, validate_problem
from .standard_form import build_standard_form

logger = logging.getLogger(__name__)

NO_SITES_MESSAGE = "No demand sites were given; nothing to allocate."


def solve(problem: ProblemInstance, config: Optional[SolverConfig] = None) -> SolutionReport:
    """Solve the allocation LP with the Big-M simplex method.

    Expected LP outcomes (optimal, infeasible, unbounded, non-convergence) and
    malformed input are all returned as a report with an explicit status;
    nothing is raised for them.
    """
    config = config or DEFAULT_CONFIG

    try:
        validate_problem(problem)
    except InputError as exc:
        logger.info("Rejected problem instance: %s", exc)
        return SolutionReport(status=SolveStatus.INVALID_INPUT, message=str(exc))

    if problem.num_sites == 0:
        return SolutionReport(status=SolveStatus.NO_SITES, message=NO_SITES_MESSAGE)

    form = build_standard_form(problem, config)
    logger.debug(
        "Built %dx%d tableau for %d site(s), capacity %s",
        form.tableau.shape[0], form.tableau.shape[1], problem.num_sites, problem.total_capacity,
    )

    idle_column = form.slack_column if config.distribute_all_stock else None
    engine = SimplexEngine(form.tableau, form.basis, form.variable_names, config, idle_column)
    result = engine.run()

    report = extract_solution(
        engine.tableau,
        engine.basis,
        engine.var_names,
        problem,
        config,
        result.status,
        result.snapshots,
        result.iterations,
    )
    logger.info(
        "Solve finished: status=%s feasible=%s cost=%.2f iterations=%d",
        report.status.value, report.is_feasible, report.total_cost, report.iterations,
    )
    return report
