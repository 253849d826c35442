from dataclasses import dataclass

from pyrsistent import pvector
from pyrsistent.typing import PVector

from portal_linker.types import Dimension, Facing, PortalName
from .region import Region


@dataclass(frozen=True)
class Portal:
    """A named portal whose position is to be solved.

    Attributes:
        name:
            Unique identifier, also the key into ``State.position``.
        dimension:
            Coordinate universe the portal is built in.
        facing:
            Axis the portal faces. Entities standing in it are spread along the
            perpendicular horizontal axis.
        inclusive:
            Regions the position may lie in (at least one is required by
            :class:`portal_linker.problem.Problem`).
        exclusive:
            Regions the position must avoid.
    """

    name: PortalName
    dimension: Dimension
    facing: Facing
    inclusive: PVector[Region] = pvector()
    exclusive: PVector[Region] = pvector()
