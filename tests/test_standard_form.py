import numpy as np
import pytest

from relief_simplex import InputError, SolverConfig, build_problem
from relief_simplex.standard_form import SLACK_NAME, build_standard_form, variable_names

M = 1e6


def test_variable_layout():
    assert variable_names(2) == ["x1", "x2", "s1", "s2", "A1", "A2", SLACK_NAME]


def test_shape_and_initial_basis(scenario_a, config):
    form = build_standard_form(scenario_a, config)

    assert form.tableau.shape == (5, 11)
    assert form.num_constraints == 4
    assert form.basis == ["A1", "A2", "A3", SLACK_NAME]
    assert form.slack_column == 9


def test_constraint_rows(scenario_a, config):
    tableau = build_standard_form(scenario_a, config).tableau

    np.testing.assert_array_equal(tableau[0], [1, 0, 0, -1, 0, 0, 1, 0, 0, 0, 500])
    np.testing.assert_array_equal(tableau[2], [0, 0, 1, 0, 0, -1, 0, 0, 1, 0, 200])
    np.testing.assert_array_equal(tableau[3], [1, 1, 1, 0, 0, 0, 0, 0, 0, 1, 1000])


def test_objective_row_is_reduced_against_artificials(scenario_a, config):
    obj = build_standard_form(scenario_a, config).tableau[-1]

    np.testing.assert_allclose(obj[:3], [55000 - M, 45000 - M, 35000 - M])
    np.testing.assert_allclose(obj[3:6], [M, M, M])
    # basic columns read zero
    np.testing.assert_allclose(obj[6:10], [0, 0, 0, 0])
    assert obj[-1] == pytest.approx(-M * 1050)


def test_big_m_comes_from_config(scenario_c):
    obj = build_standard_form(scenario_c, SolverConfig(big_m=100)).tableau[-1]
    np.testing.assert_allclose(obj, [50000 - 100, 100, 0, 0, -100 * 100])


def test_no_sites_is_rejected(config):
    with pytest.raises(InputError):
        build_standard_form(build_problem([], 10), config)
