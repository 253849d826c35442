"""Position and point components.

``Position`` is an immutable integer block coordinate stored in
``State.position`` keyed by portal name. ``Point`` is its real-valued
counterpart used for probe points and optimization targets.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """Block coordinate.

    Attributes:
        x: East/west axis.
        y: Vertical axis.
        z: North/south axis.
    """

    x: int
    y: int
    z: int


@dataclass(frozen=True)
class Point:
    """Real-valued coordinate (sub-block precision)."""

    x: float
    y: float
    z: float
