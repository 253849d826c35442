"""Common type aliases and enumerations.

``StatusFn`` and ``ProgressFn`` are the observation hooks the solver calls
while it runs; see :func:`portal_linker.solve.solve`.
"""

from enum import StrEnum
from typing import Callable, Optional

PortalName = str


class Dimension(StrEnum):
    """Coordinate universe a portal lives in (A is the reference frame)."""

    A = "A"
    B = "B"

    @property
    def other(self) -> "Dimension":
        return Dimension.B if self is Dimension.A else Dimension.A


class Facing(StrEnum):
    """Horizontal axis the portal faces."""

    X = "X"
    Z = "Z"


class RegionKind(StrEnum):
    """Position constraint semantics for a region."""

    INC = "INC"
    EXC = "EXC"


StatusFn = Callable[[str], None]

# (iteration, bound, temperature, best_metric) -> cancel?
ProgressFn = Callable[[int, int, float, float], Optional[bool]]
