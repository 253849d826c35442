"""Final-state verification and diagnostics.

:func:`verify_solution` recomputes every constraint from scratch for a state
handed over by the annealer and gathers the numbers a report needs:

* which portals sit outside their allowed regions (should be none),
* which desired links do not hold,
* the linear / squared distance of each optimization goal,
* for every ordered pair of portals in different dimensions, the distance
    from the source's floored center-probe target block to the other portal.
    This is reported for all pairs, not only declared links, to help diagnose
    near-miss links.
"""

import math
from dataclasses import dataclass
from typing import Tuple

from portal_linker.components import DesiredLink, Position
from portal_linker.problem import Problem
from portal_linker.state import State
from portal_linker.systems.cost import goal_distance_sq
from portal_linker.systems.link import is_link_valid, target_block
from portal_linker.types import Dimension, PortalName
from portal_linker.utils.math import ENTITY_OFFSET, add, distance_sq
from portal_linker.utils.region import satisfies_position_constraints


@dataclass(frozen=True)
class GoalDistance:
    label: str
    squared: float
    linear: float
    weight: float


@dataclass(frozen=True)
class ProbeDistance:
    """Distance from ``source``'s center-probe target block to ``destination``."""

    source: PortalName
    source_dimension: Dimension
    destination: PortalName
    destination_dimension: Dimension
    target: Position
    position: Position
    squared: float
    linear: float

    @property
    def key(self) -> str:
        return (
            f"{self.source} ({self.source_dimension}) -> "
            f"{self.destination} ({self.destination_dimension})"
        )


@dataclass(frozen=True)
class Verification:
    violated_positions: Tuple[PortalName, ...]
    violated_links: Tuple[DesiredLink, ...]
    goal_distances: Tuple[GoalDistance, ...]
    probe_distances: Tuple[ProbeDistance, ...]

    @property
    def success(self) -> bool:
        return not self.violated_positions and not self.violated_links

    @property
    def message(self) -> str:
        if self.success:
            return "Solution found."
        message = "Constraints violated. Best attempt shown."
        if self.violated_positions:
            message += (
                " Portals violating position constraints: "
                f"{', '.join(self.violated_positions)}."
            )
        if self.violated_links:
            message += (
                " Desired links not satisfied: "
                f"{'; '.join(str(link) for link in self.violated_links)}."
            )
        return message


def goal_distances(problem: Problem, state: State) -> Tuple[GoalDistance, ...]:
    distances = []
    for goal in problem.goals:
        squared = goal_distance_sq(problem, state, goal)
        distances.append(
            GoalDistance(
                label=goal.label,
                squared=squared,
                linear=math.sqrt(squared),
                weight=goal.weight,
            )
        )
    return tuple(distances)


def probe_distances(problem: Problem, state: State) -> Tuple[ProbeDistance, ...]:
    distances = []
    for source_name in problem.portal_names:
        source = problem.portals[source_name]
        destination_dimension = source.dimension.other
        target = target_block(
            add(state.position[source_name], ENTITY_OFFSET),
            problem.dimensions[destination_dimension].scale,
        )
        for destination_name in problem.names_by_dimension[destination_dimension]:
            position = state.position[destination_name]
            squared = distance_sq(target, position)
            distances.append(
                ProbeDistance(
                    source=source_name,
                    source_dimension=source.dimension,
                    destination=destination_name,
                    destination_dimension=destination_dimension,
                    target=target,
                    position=position,
                    squared=squared,
                    linear=math.sqrt(squared),
                )
            )
    return tuple(distances)


def verify_solution(problem: Problem, state: State) -> Verification:
    violated_positions = tuple(
        name
        for name in problem.portal_names
        if not satisfies_position_constraints(
            problem.portals[name], state.position[name]
        )
    )
    violated_links = tuple(
        link for link in problem.links if not is_link_valid(problem, state, link)
    )
    return Verification(
        violated_positions=violated_positions,
        violated_links=violated_links,
        goal_distances=goal_distances(problem, state),
        probe_distances=probe_distances(problem, state),
    )
