"""Immutable problem definition.

A :class:`Problem` bundles everything the solver treats as fixed input: the
portals with their position constraints, the desired links, the optimization
goals and the per-dimension matching constants. It is validated once on
construction; the solver never mutates it.

``portal_names`` records declaration order. It is the canonical iteration
order everywhere (neighbor selection, tie-breaking, reports) because
``PMap`` iteration order is not stable across interpreter runs.
"""

from dataclasses import dataclass, field
from functools import cached_property
from typing import Iterable, Optional, Tuple

from pyrsistent import pmap, pvector
from pyrsistent.typing import PMap, PVector

from portal_linker.components import (
    DesiredLink,
    Goal,
    Portal,
    PortalPairGoal,
)
from portal_linker.config import DEFAULT_DIMENSIONS, DimensionConfig
from portal_linker.errors import InvalidProblemError
from portal_linker.types import Dimension, PortalName


@dataclass(frozen=True)
class Problem:
    """Validated solver input.

    Attributes:
        portals (PMap[PortalName, Portal]): Portal definitions keyed by name.
        portal_names (Tuple[PortalName, ...]): Names in declaration order.
        links (PVector[DesiredLink]): Links that must hold.
        goals (PVector[Goal]): Weighted distance objectives.
        entity_size (float): Footprint width of the probing entity.
        dimensions (PMap[Dimension, DimensionConfig]): Scale and search radius
            per destination dimension.
    """

    portals: PMap[PortalName, Portal]
    portal_names: Tuple[PortalName, ...]
    links: PVector[DesiredLink] = pvector()
    goals: PVector[Goal] = pvector()
    entity_size: float = 1.0
    dimensions: PMap[Dimension, DimensionConfig] = field(
        default_factory=lambda: DEFAULT_DIMENSIONS
    )

    def __post_init__(self) -> None:
        if self.entity_size <= 0:
            raise InvalidProblemError("Entity size must be positive")
        if len(set(self.portal_names)) != len(self.portal_names):
            raise InvalidProblemError("Duplicate portal names")
        if set(self.portal_names) != set(self.portals.keys()):
            raise InvalidProblemError("portal_names must list exactly the portals")
        for dimension in Dimension:
            if dimension not in self.dimensions:
                raise InvalidProblemError(f"Missing config for dimension {dimension}")
        for name in self.portal_names:
            portal = self.portals[name]
            if portal.name != name:
                raise InvalidProblemError(
                    f"Portal keyed as '{name}' is named '{portal.name}'"
                )
            if len(portal.inclusive) == 0:
                raise InvalidProblemError(
                    f"Portal {name} has no inclusive position constraints "
                    "(POS INC) defined."
                )
        for link in self.links:
            self._check_link(link)
        for goal in self.goals:
            self._check_goal(goal)

    def _check_link(self, link: DesiredLink) -> None:
        for name in (link.source, link.destination):
            if name not in self.portals:
                raise InvalidProblemError(f"Unknown portal '{name}' in link {link}")
        source = self.portals[link.source]
        destination = self.portals[link.destination]
        if source.dimension == destination.dimension:
            raise InvalidProblemError(
                f"LINK source '{source.name}' ({source.dimension}) and destination "
                f"'{destination.name}' ({destination.dimension}) must be in "
                "different dimensions"
            )

    def _check_goal(self, goal: Goal) -> None:
        if isinstance(goal, PortalPairGoal):
            names = (goal.first, goal.second)
        else:
            names = (goal.portal,)
        for name in names:
            if name not in self.portals:
                raise InvalidProblemError(
                    f"Unknown portal '{name}' in goal {goal.label}"
                )
        if goal.weight < 0:
            raise InvalidProblemError(f"Negative weight for goal {goal.label}")

    @cached_property
    def names_by_dimension(self) -> PMap[Dimension, Tuple[PortalName, ...]]:
        """Portal names grouped by dimension, each in declaration order."""
        return pmap(
            {
                dimension: tuple(
                    n
                    for n in self.portal_names
                    if self.portals[n].dimension == dimension
                )
                for dimension in Dimension
            }
        )


def create_problem(
    portals: Iterable[Portal],
    links: Iterable[DesiredLink] = (),
    goals: Iterable[Goal] = (),
    entity_size: float = 1.0,
    dimensions: Optional[PMap[Dimension, DimensionConfig]] = None,
) -> Problem:
    """Build a :class:`Problem` from plain iterables, keeping portal order."""
    portal_list = list(portals)
    return Problem(
        portals=pmap({p.name: p for p in portal_list}),
        portal_names=tuple(p.name for p in portal_list),
        links=pvector(links),
        goals=pvector(goals),
        entity_size=entity_size,
        dimensions=dimensions if dimensions is not None else DEFAULT_DIMENSIONS,
    )

