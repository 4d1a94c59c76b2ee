"""Big-M simplex allocation of relief-supply packets across demand sites."""

from .allocator import ClosedFormAllocation, allocate_closed_form
from .config import DEFAULT_CONFIG, SolverConfig
from .conformance import CrossCheckResult, cross_check
from .exceptions import (
    ConfigurationError,
    InputError,
    PivotError,
    ReliefSimplexError,
    SolveStatus,
)
from .extract import SolutionReport
from .model import DemandSite, ProblemInstance, build_problem
from .solver import solve
from .trace import TableauSnapshot

__all__ = [
    "ClosedFormAllocation",
    "ConfigurationError",
    "CrossCheckResult",
    "DEFAULT_CONFIG",
    "DemandSite",
    "InputError",
    "PivotError",
    "ProblemInstance",
    "ReliefSimplexError",
    "SolutionReport",
    "SolveStatus",
    "SolverConfig",
    "TableauSnapshot",
    "allocate_closed_form",
    "build_problem",
    "cross_check",
    "solve",
]
