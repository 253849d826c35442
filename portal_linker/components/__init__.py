"""Component dataclasses.

All components are immutable dataclasses. :class:`Portal`, :class:`Region`,
:class:`DesiredLink` and the goal types describe the (static) problem;
:class:`Position` values are what the solver assigns and are stored in
:class:`portal_linker.state.State`.
"""

from .goal import Goal, PortalPairGoal, PortalPointGoal
from .link import DesiredLink
from .portal import Portal
from .position import Point, Position
from .region import Region

__all__ = [
    "DesiredLink",
    "Goal",
    "Point",
    "Portal",
    "PortalPairGoal",
    "PortalPointGoal",
    "Position",
    "Region",
]
