import numpy as np
import pytest

from relief_simplex import (
    DemandSite,
    PivotError,
    ProblemInstance,
    SolverConfig,
    SolveStatus,
    build_problem,
    solve,
)
from relief_simplex.engine import SimplexEngine

M = 1e6


def test_scenario_a_stock_below_minimums(scenario_a, config):
    report = solve(scenario_a, config)

    assert report.status is SolveStatus.INFEASIBLE
    assert not report.is_feasible
    assert report.per_site_allocation == pytest.approx(
        {"cianjur": 450, "sumedang": 350, "garut": 200}
    )
    assert report.total_allocated == pytest.approx(1000)
    assert report.per_site_artificial == pytest.approx({"cianjur": 50, "sumedang": 0, "garut": 0})
    assert sum(report.per_site_shortfall.values()) == pytest.approx(1050 - 1000)
    assert report.total_cost == pytest.approx(450 * 55000 + 350 * 45000 + 200 * 35000)
    assert report.penalty_cost == pytest.approx(50 * M)
    assert "below the total minimum requirement" in report.message


def test_scenario_b_leftover_goes_to_cheapest_site(scenario_b, config):
    report = solve(scenario_b, config)

    assert report.status is SolveStatus.OPTIMAL
    assert report.is_feasible
    assert report.per_site_allocation == pytest.approx(
        {"cianjur": 500, "sumedang": 350, "garut": 350}
    )
    assert report.total_cost == pytest.approx(500 * 55000 + 350 * 45000 + 350 * 35000)
    assert report.penalty_cost == 0
    assert report.idle_stock == 0
    assert report.iterations == 4
    assert len(report.snapshots) == 5


def test_scenario_b_without_idle_stock_pass(scenario_b):
    report = solve(scenario_b, SolverConfig(distribute_all_stock=False))

    assert report.is_feasible
    assert report.per_site_allocation == pytest.approx(
        {"cianjur": 500, "sumedang": 350, "garut": 200}
    )
    assert report.idle_stock == pytest.approx(150)
    assert "150 packets remain in stock" in report.message


def test_scenario_c_single_site(scenario_c, config):
    report = solve(scenario_c, config)

    assert report.status is SolveStatus.OPTIMAL
    assert report.is_feasible
    assert report.per_site_allocation == {"only": pytest.approx(100)}
    assert report.total_cost == pytest.approx(100 * 50000)
    assert len(report.snapshots) <= 2
    assert report.snapshots[-1].is_optimal
    assert report.snapshots[0].entering == "x1"
    assert report.snapshots[0].leaving == "A1"


def test_no_sites_is_an_explicit_empty_report(config):
    report = solve(build_problem([], 500), config)

    assert report.status is SolveStatus.NO_SITES
    assert not report.is_feasible
    assert report.per_site_allocation == {}
    assert report.total_cost == 0
    assert report.snapshots == ()
    assert report.final_snapshot is None


def test_malformed_instance_is_reported_not_raised(config):
    problem = ProblemInstance(sites=(DemandSite("a", "A", 10, -1),), total_capacity=10)
    report = solve(problem, config)

    assert report.status is SolveStatus.INVALID_INPUT
    assert "Unit cost" in report.message
    assert report.snapshots == ()


def test_non_convergence_is_reported(scenario_a):
    report = solve(scenario_a, SolverConfig(max_iterations=2))

    assert report.status is SolveStatus.NON_CONVERGENCE
    assert report.iterations == 2
    assert report.final_snapshot.status is SolveStatus.NON_CONVERGENCE
    assert "did not converge" in report.message


def test_default_config_is_used_when_omitted(scenario_c):
    assert solve(scenario_c).is_feasible


def test_solving_twice_gives_identical_results(scenario_a):
    first = solve(scenario_a)
    second = solve(scenario_a)

    assert first == second
    assert first.per_site_allocation == second.per_site_allocation
    assert first.total_cost == second.total_cost
    assert first.is_feasible == second.is_feasible
    assert len(first.snapshots) == len(second.snapshots)


def test_solves_are_independent(scenario_a, scenario_b):
    first = solve(scenario_a)
    frozen = first.snapshots[-1].tableau.copy()
    solve(scenario_b)

    np.testing.assert_array_equal(first.snapshots[-1].tableau, frozen)
    assert solve(scenario_a).per_site_allocation == first.per_site_allocation


def test_zero_capacity_allocates_nothing():
    problem = build_problem(
        [DemandSite("a", "A", 10, 5), DemandSite("b", "B", 20, 3)], 0
    )
    report = solve(problem)

    assert not report.is_feasible
    assert report.total_allocated == pytest.approx(0)
    assert report.per_site_shortfall == pytest.approx({"a": 10, "b": 20})


def _random_instances(feasible, count=15, seed=7):
    rng = np.random.default_rng(seed)
    for _ in range(count):
        n = int(rng.integers(1, 7))
        minimums = rng.integers(1, 500, size=n)
        costs = rng.choice(np.arange(1000, 60000, 250), size=n, replace=False)
        total = int(minimums.sum())
        if feasible:
            capacity = total + int(rng.integers(0, 400))
        else:
            capacity = int(rng.integers(0, total))
        sites = [
            DemandSite(f"site-{i}", f"Site {i}", float(minimums[i]), float(costs[i]))
            for i in range(n)
        ]
        yield build_problem(sites, capacity)


@pytest.mark.parametrize("problem", list(_random_instances(feasible=True)))
def test_sufficient_stock_meets_every_minimum(problem):
    report = solve(problem)

    assert report.status is SolveStatus.OPTIMAL
    assert report.is_feasible
    for site in problem.sites:
        assert report.per_site_allocation[site.identifier] >= site.minimum_requirement - 1e-4
        assert report.per_site_artificial[site.identifier] == 0
    assert report.total_allocated == pytest.approx(problem.total_capacity)


@pytest.mark.parametrize("problem", list(_random_instances(feasible=False, seed=11)))
def test_short_stock_is_fully_distributed(problem):
    report = solve(problem)

    assert report.status is SolveStatus.INFEASIBLE
    assert report.total_allocated == pytest.approx(problem.total_capacity)
    assert sum(report.per_site_shortfall.values()) == pytest.approx(
        problem.total_minimum_requirement - problem.total_capacity
    )


def test_pivot_breakdown_is_reported_not_raised(scenario_c, monkeypatch):
    def broken_pivot(self, pivot_row, pivot_col):
        raise PivotError(f"Pivot element at row {pivot_row}, column {pivot_col} is zero")

    monkeypatch.setattr(SimplexEngine, "pivot", broken_pivot)
    report = solve(scenario_c)

    assert report.status is SolveStatus.NON_CONVERGENCE
    assert report.iterations == 0
    assert len(report.snapshots) == 2
    assert report.final_snapshot.status is SolveStatus.NON_CONVERGENCE
    assert report.final_snapshot.description.startswith("Stopped: Pivot element")
