"""Vector helpers for block / point arithmetic and frame conversion."""

import math
from typing import Union

from portal_linker.components import Point, Position
from portal_linker.types import Dimension

Vec = Union[Point, Position]

# Sub-block offset of the entity standing in a portal block.
ENTITY_OFFSET = Point(0.5, 0.0, 0.5)


def add(vec: Vec, offset: Vec) -> Point:
    return Point(vec.x + offset.x, vec.y + offset.y, vec.z + offset.z)


def scale_xz(vec: Vec, scale: float) -> Point:
    """Scale the horizontal axes, leaving ``y`` untouched."""
    return Point(vec.x * scale, vec.y, vec.z * scale)


def floor_point(point: Vec) -> Position:
    return Position(math.floor(point.x), math.floor(point.y), math.floor(point.z))


def distance_sq(a: Vec, b: Vec) -> float:
    dx = a.x - b.x
    dy = a.y - b.y
    dz = a.z - b.z
    return dx * dx + dy * dy + dz * dz


def to_dimension_a(pos: Vec, dimension: Dimension, a_scale: float) -> Point:
    """Express ``pos`` in the Dimension A frame.

    Arguments:
        pos: Coordinate in ``dimension``'s frame.
        dimension: Frame ``pos`` is given in.
        a_scale: Scale applied to coordinates arriving in Dimension A (the
            B to A factor).
    """
    if dimension == Dimension.A:
        return Point(pos.x, pos.y, pos.z)
    return scale_xz(pos, a_scale)
