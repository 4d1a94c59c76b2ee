"""Problem model: demand sites and the stock shared between them."""

import math
from dataclasses import dataclass
from typing import Iterable, Mapping, Tuple, Union

from .exceptions import InputError


@dataclass(frozen=True)
class DemandSite:
    """A location that needs relief packets.

    Attributes:
        identifier: Stable key used in the allocation mappings.
        name: Human-readable site name.
        minimum_requirement: Packets the site must receive at least.
        unit_cost: Distribution cost per packet delivered to the site.
    """

    identifier: str
    name: str
    minimum_requirement: float
    unit_cost: float


@dataclass(frozen=True)
class ProblemInstance:
    sites: Tuple[DemandSite, ...]
    total_capacity: float

    @property
    def num_sites(self) -> int:
        return len(self.sites)

    @property
    def total_minimum_requirement(self) -> float:
        return sum(site.minimum_requirement for site in self.sites)

    @property
    def is_capacity_sufficient(self) -> bool:
        return self.total_capacity >= self.total_minimum_requirement


SiteLike = Union[DemandSite, Mapping[str, object]]


def _as_number(value, label):
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InputError(f"{label} must be a number, got {value!r}") from None
    if math.isnan(number) or math.isinf(number):
        raise InputError(f"{label} must be finite, got {value!r}")
    return number


def _coerce_site(index: int, site: SiteLike) -> DemandSite:
    if isinstance(site, DemandSite):
        return site
    if not isinstance(site, Mapping):
        raise InputError(f"Site #{index + 1} must be a DemandSite or a mapping")
    name = str(site.get("name") or f"Site {index + 1}")
    identifier = str(site.get("identifier") or site.get("id") or f"site-{index + 1}")
    try:
        minimum = site["minimum_requirement"]
        cost = site["unit_cost"]
    except KeyError as exc:
        raise InputError(f"Site {name!r} is missing field {exc.args[0]!r}") from None
    return DemandSite(
        identifier=identifier,
        name=name,
        minimum_requirement=_as_number(minimum, f"Minimum requirement of {name!r}"),
        unit_cost=_as_number(cost, f"Unit cost of {name!r}"),
    )


def validate_problem(problem: ProblemInstance) -> None:
    """Raise :class:`InputError` if the instance cannot be handed to the solver."""
    capacity = _as_number(problem.total_capacity, "Total capacity")
    if capacity < 0:
        raise InputError(f"Total capacity must be non-negative, got {capacity}")

    seen = set()
    for site in problem.sites:
        if site.identifier in seen:
            raise InputError(f"Duplicate site identifier {site.identifier!r}")
        seen.add(site.identifier)
        minimum = _as_number(site.minimum_requirement, f"Minimum requirement of {site.name!r}")
        cost = _as_number(site.unit_cost, f"Unit cost of {site.name!r}")
        if minimum < 0:
            raise InputError(f"Minimum requirement of {site.name!r} must be non-negative")
        if cost < 0:
            raise InputError(f"Unit cost of {site.name!r} must be non-negative")


def build_problem(sites: Iterable[SiteLike], total_capacity) -> ProblemInstance:
    """Construct and validate a problem instance.

    ``sites`` may mix :class:`DemandSite` objects and plain mappings with the
    keys ``name``, ``minimum_requirement``, ``unit_cost`` and optionally
    ``identifier``. An empty site list is accepted; ``solve`` reports it as
    having no sites.
    """
    problem = ProblemInstance(
        sites=tuple(_coerce_site(i, site) for i, site in enumerate(sites)),
        total_capacity=_as_number(total_capacity, "Total capacity"),
    )
    validate_problem(problem)
    return problem
