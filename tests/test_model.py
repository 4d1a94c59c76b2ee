import dataclasses
import math

import pytest

from relief_simplex import DemandSite, InputError, ProblemInstance, build_problem
from relief_simplex.model import validate_problem


def test_build_problem_accepts_mappings_and_sites():
    problem = build_problem(
        [
            {"name": "Cianjur", "minimum_requirement": 500, "unit_cost": "55000"},
            DemandSite("garut", "Garut", 200, 35000),
        ],
        1000,
    )

    assert problem.num_sites == 2
    first = problem.sites[0]
    assert first.identifier == "site-1"
    assert first.unit_cost == 55000.0
    assert problem.sites[1].identifier == "garut"
    assert problem.total_minimum_requirement == 700
    assert problem.is_capacity_sufficient


def test_demand_site_is_immutable():
    site = DemandSite("a", "A", 10, 1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        site.unit_cost = 5


def test_empty_site_list_is_allowed():
    problem = build_problem([], 100)
    assert problem.num_sites == 0
    assert problem.total_minimum_requirement == 0


@pytest.mark.parametrize(
    "sites, capacity, fragment",
    [
        ([], -1, "Total capacity"),
        ([DemandSite("a", "A", -5, 10)], 10, "Minimum requirement"),
        ([DemandSite("a", "A", 5, -10)], 10, "Unit cost"),
        ([{"name": "A", "minimum_requirement": 5}], 10, "unit_cost"),
        ([{"name": "A", "minimum_requirement": "lots", "unit_cost": 1}], 10, "must be a number"),
        ([{"name": "A", "minimum_requirement": math.nan, "unit_cost": 1}], 10, "finite"),
        ([DemandSite("a", "A", 1, 1), DemandSite("a", "B", 1, 1)], 10, "Duplicate"),
    ],
)
def test_build_problem_rejects_malformed_input(sites, capacity, fragment):
    with pytest.raises(InputError, match=fragment):
        build_problem(sites, capacity)


def test_input_error_is_a_value_error():
    with pytest.raises(ValueError):
        build_problem([], "not a number")


def test_validate_problem_checks_directly_built_instances():
    problem = ProblemInstance(sites=(DemandSite("a", "A", 10, 1),), total_capacity=-3)
    with pytest.raises(InputError):
        validate_problem(problem)
