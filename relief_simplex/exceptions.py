"""Exceptions and terminal statuses for the relief allocation solver."""

from enum import Enum


class ReliefSimplexError(Exception):
    """Base class for all solver errors."""


class InputError(ReliefSimplexError, ValueError):
    """Raised when a problem instance is malformed (negative stock, cost, need)."""


class ConfigurationError(ReliefSimplexError, ValueError):
    """Raised when solver settings are inconsistent."""


class PivotError(ReliefSimplexError, ArithmeticError):
    """Raised when a pivot element is numerically zero."""


class SolveStatus(str, Enum):
    OPTIMAL = "optimal"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    NON_CONVERGENCE = "non_convergence"
    NO_SITES = "no_sites"
    INVALID_INPUT = "invalid_input"
