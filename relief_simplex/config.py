from dataclasses import dataclass
from typing import Optional

from .exceptions import ConfigurationError


@dataclass(frozen=True)
class SolverConfig:
    """Settings for a single Big-M solve.

    Attributes:
        big_m: Penalty attached to each artificial variable.
        max_iterations: Pivot cap; hitting it is reported as non-convergence.
        tolerance: Magnitudes below this are treated as zero in snapshots and
            in the optimality and feasibility tests.
        display_threshold: Magnitudes above this render as ``M`` in tables.
            Defaults to a tenth of ``big_m``. Real costs above it collapse to
            ``M`` too, so pick ``big_m`` well above the total cost when the
            tables should show real totals.
        pivot_epsilon: Smallest pivot element accepted by the engine.
        distribute_all_stock: Once an optimum is reached with stock left in
            the capacity slack, charge that slack with ``big_m`` and keep
            pivoting so the leftover goes to the cheapest site.
    """

    big_m: float = 1e6
    max_iterations: int = 100
    tolerance: float = 1e-4
    display_threshold: Optional[float] = None
    pivot_epsilon: float = 1e-10
    distribute_all_stock: bool = True

    def __post_init__(self):
        if not self.big_m > 0:
            raise ConfigurationError(f"big_m must be positive, got {self.big_m}")
        if int(self.max_iterations) != self.max_iterations or self.max_iterations < 0:
            raise ConfigurationError(
                f"max_iterations must be a non-negative integer, got {self.max_iterations}"
            )
        if not self.tolerance > 0:
            raise ConfigurationError(f"tolerance must be positive, got {self.tolerance}")
        if self.display_threshold is None:
            object.__setattr__(self, "display_threshold", self.big_m / 10)
        if not self.display_threshold > 0:
            raise ConfigurationError(
                f"display_threshold must be positive, got {self.display_threshold}"
            )
        if not 0 < self.pivot_epsilon <= self.tolerance:
            raise ConfigurationError(
                "pivot_epsilon must be positive and no larger than tolerance"
            )


DEFAULT_CONFIG = SolverConfig()
