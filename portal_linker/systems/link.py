"""Link validity predicate.

Reproduces the destination-portal lookup an entity triggers when it steps
through a portal:

1. The entity stands at the block center ``position + (0.5, 0, 0.5)``. Its
   footprint is probed at the center and at ``±entity_size / 2`` along the
   horizontal axis perpendicular to the portal's facing.
2. Each probe's horizontal coordinates are multiplied by the destination
   dimension's scale, then floored to the *target block*.
3. Every destination-dimension portal within the square search radius of
   the target block (horizontal axes only) is a candidate.
4. The candidate with the smallest squared 3-D distance to the target block
   wins; equal distances prefer the lower ``y``. A remaining tie goes to the
   portal declared first in the problem.

A link holds only when all three probes resolve to the declared destination.
Every function here is pure.
"""

from typing import Optional, Tuple

from portal_linker.components import DesiredLink, Point, Position
from portal_linker.problem import Problem
from portal_linker.state import State
from portal_linker.types import Dimension, Facing, PortalName
from portal_linker.utils.math import (
    ENTITY_OFFSET,
    add,
    distance_sq,
    floor_point,
    scale_xz,
)


def probe_points(
    position: Position, facing: Facing, entity_size: float
) -> Tuple[Point, Point, Point]:
    """Return the center probe followed by the two footprint-edge probes."""
    center = add(position, ENTITY_OFFSET)
    half = entity_size / 2.0
    if facing == Facing.X:
        return (
            center,
            Point(center.x, center.y, center.z + half),
            Point(center.x, center.y, center.z - half),
        )
    return (
        center,
        Point(center.x + half, center.y, center.z),
        Point(center.x - half, center.y, center.z),
    )


def target_block(point: Point, scale: float) -> Position:
    """Rescale ``point`` horizontally into the destination frame and floor it."""
    return floor_point(scale_xz(point, scale))


def link_candidates(
    problem: Problem, state: State, block: Position, dimension: Dimension
) -> Tuple[PortalName, ...]:
    """Destination-dimension portals inside the square search area of ``block``."""
    radius = problem.dimensions[dimension].search_radius
    candidates = []
    for name in problem.names_by_dimension[dimension]:
        pos = state.position[name]
        if abs(pos.x - block.x) <= radius and abs(pos.z - block.z) <= radius:
            candidates.append(name)
    return tuple(candidates)


def nearest_portal(
    state: State, block: Position, candidates: Tuple[PortalName, ...]
) -> Optional[PortalName]:
    """Pick the candidate closest to ``block``, preferring lower ``y`` on ties."""
    best: Optional[PortalName] = None
    best_dist = float("inf")
    best_y = float("inf")
    for name in candidates:
        pos = state.position[name]
        dist = distance_sq(block, pos)
        if dist < best_dist or (dist == best_dist and pos.y < best_y):
            best, best_dist, best_y = name, dist, pos.y
    return best


def resolve_link(
    problem: Problem, state: State, point: Point, dimension: Dimension
) -> Optional[PortalName]:
    """Return the portal in ``dimension`` that an entity at ``point`` arrives at.

    ``None`` means no portal lies within the search radius.
    """
    block = target_block(point, problem.dimensions[dimension].scale)
    return nearest_portal(
        state, block, link_candidates(problem, state, block, dimension)
    )


def is_link_valid(problem: Problem, state: State, link: DesiredLink) -> bool:
    source = problem.portals[link.source]
    dimension = problem.portals[link.destination].dimension
    for point in probe_points(
        state.position[link.source], source.facing, problem.entity_size
    ):
        if resolve_link(problem, state, point, dimension) != link.destination:
            return False
    return True


def count_link_violations(problem: Problem, state: State) -> int:
    return sum(1 for link in problem.links if not is_link_valid(problem, state, link))
