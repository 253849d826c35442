"""Placement commands for solved positions.

Dimension A is the overworld and Dimension B the nether. The placed portal
block's ``axis`` is the horizontal axis orthogonal to the portal's facing.
"""

from typing import List

from portal_linker.components import Portal, Position
from portal_linker.problem import Problem
from portal_linker.state import State
from portal_linker.types import Dimension, Facing

DIMENSION_IDS = {
    Dimension.A: "overworld",
    Dimension.B: "the_nether",
}


def placement_command(portal: Portal, pos: Position) -> str:
    axis = "z" if portal.facing == Facing.X else "x"
    return (
        f"/execute in minecraft:{DIMENSION_IDS[portal.dimension]} run setblock "
        f"{pos.x} {pos.y} {pos.z} minecraft:nether_portal[axis={axis}] strict"
    )


def placement_commands(problem: Problem, state: State) -> List[str]:
    """One command per portal, sorted by portal name."""
    return [
        placement_command(problem.portals[name], state.position[name])
        for name in sorted(state.position.keys())
        if name in problem.portals
    ]
