"""Position constraint helpers shared by initialization and neighbor moves."""

import random
from typing import Iterable, Optional

from portal_linker.components import Portal, Position, Region


def in_any(regions: Iterable[Region], pos: Position) -> bool:
    return any(region.contains(pos) for region in regions)


def satisfies_position_constraints(portal: Portal, pos: Position) -> bool:
    """Inside at least one inclusive region and outside every exclusive one."""
    return in_any(portal.inclusive, pos) and not in_any(portal.exclusive, pos)


def random_point_in(region: Region, rng: random.Random) -> Position:
    """Uniform integer position inside ``region`` (bounds inclusive)."""
    return Position(
        rng.randint(region.min.x, region.max.x),
        rng.randint(region.min.y, region.max.y),
        rng.randint(region.min.z, region.max.z),
    )


def sample_valid_position(
    portal: Portal, rng: random.Random, attempts: int
) -> Optional[Position]:
    """Draw up to ``attempts`` points from random inclusive regions.

    Returns the first draw that avoids every exclusive region, or ``None``.
    """
    if not portal.inclusive:
        return None
    for _ in range(attempts):
        region = portal.inclusive[rng.randrange(len(portal.inclusive))]
        pos = random_point_in(region, rng)
        if not in_any(portal.exclusive, pos):
            return pos
    return None
