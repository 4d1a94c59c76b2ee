"""Standard-form Big-M tableau for the relief allocation LP.

For ``n`` sites the tableau has ``n + 1`` constraint rows plus the objective
row, and ``3n + 1`` variable columns plus the right-hand side::

    x1..xn | s1..sn | A1..An | s_stock | RHS

Rows ``0..n-1`` read ``x_i - s_i + A_i = minimum_i`` and row ``n`` reads
``x_1 + ... + x_n + s_stock = capacity``.
"""

from dataclasses import dataclass
from typing import List

import numpy as np

from .config import SolverConfig
from .exceptions import InputError
from .model import ProblemInstance

SLACK_NAME = "s_stock"


@dataclass
class StandardForm:
    tableau: np.ndarray
    basis: List[str]
    variable_names: List[str]

    @property
    def num_constraints(self):
        return self.tableau.shape[0] - 1

    @property
    def slack_column(self):
        return self.variable_names.index(SLACK_NAME)


def variable_names(num_sites):
    names = [f"x{i + 1}" for i in range(num_sites)]
    names += [f"s{i + 1}" for i in range(num_sites)]
    names += [f"A{i + 1}" for i in range(num_sites)]
    names.append(SLACK_NAME)
    return names


def is_artificial(name):
    return name.startswith("A")


def build_standard_form(problem: ProblemInstance, config: SolverConfig) -> StandardForm:
    n = problem.num_sites
    if n == 0:
        raise InputError("Cannot build a tableau without demand sites")

    names = variable_names(n)
    total_vars = len(names)
    num_constraints = n + 1
    surplus_idx = n
    artificial_idx = 2 * n
    slack_idx = 3 * n
    M = config.big_m

    tableau = np.zeros((num_constraints + 1, total_vars + 1))
    basis = []

    for i, site in enumerate(problem.sites):
        tableau[i, i] = 1
        tableau[i, surplus_idx + i] = -1
        tableau[i, artificial_idx + i] = 1
        tableau[i, -1] = site.minimum_requirement
        basis.append(names[artificial_idx + i])

    tableau[n, :n] = 1
    tableau[n, slack_idx] = 1
    tableau[n, -1] = problem.total_capacity
    basis.append(SLACK_NAME)

    # Raw objective: minimize cost + M * artificials
    for i, site in enumerate(problem.sites):
        tableau[-1, i] = site.unit_cost
        tableau[-1, artificial_idx + i] = M

    # Express the objective in terms of non-basic variables only
    for i in range(n):
        tableau[-1] -= M * tableau[i]

    return StandardForm(tableau=tableau, basis=basis, variable_names=names)
