"""Optimization goal components.

Goals are soft objectives summed into the Stage 2 cost. Distances are always
measured in the Dimension A frame; see
:func:`portal_linker.utils.math.to_dimension_a`.
"""

from dataclasses import dataclass
from typing import Union

from portal_linker.types import PortalName
from .position import Point


@dataclass(frozen=True)
class PortalPairGoal:
    """Pull two portals towards each other.

    Attributes:
        first: One operand.
        second: Other operand (may be in either dimension).
        weight: Non-negative multiplier of the squared distance.
    """

    first: PortalName
    second: PortalName
    weight: float = 1.0

    @property
    def label(self) -> str:
        return f"{self.first} <-> {self.second}"


@dataclass(frozen=True)
class PortalPointGoal:
    """Pull a portal towards a fixed point given in Dimension A coordinates."""

    portal: PortalName
    target: Point
    weight: float = 1.0

    @property
    def label(self) -> str:
        t = self.target
        coords = ",".join(_format_coord(v) for v in (t.x, t.y, t.z))
        return f"{self.portal} <-> [{coords}]"


def _format_coord(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


Goal = Union[PortalPairGoal, PortalPointGoal]
