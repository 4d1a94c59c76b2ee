import pytest

from relief_simplex import DemandSite, SolverConfig, build_problem


@pytest.fixture
def scenario_sites():
    return [
        DemandSite("cianjur", "Cianjur", 500, 55000),
        DemandSite("sumedang", "Sumedang", 350, 45000),
        DemandSite("garut", "Garut", 200, 35000),
    ]


@pytest.fixture
def scenario_a(scenario_sites):
    return build_problem(scenario_sites, 1000)


@pytest.fixture
def scenario_b(scenario_sites):
    return build_problem(scenario_sites, 1200)


@pytest.fixture
def scenario_c():
    return build_problem([DemandSite("only", "Only site", 100, 50000)], 100)


@pytest.fixture
def config():
    return SolverConfig()
