"""Immutable solver ``State``.

A :class:`State` is the only thing the annealer changes: the assignment of a
block :class:`~portal_linker.components.Position` to every portal name. Like
every other value in the package it is frozen; a move produces a *new*
``State`` that shares structure with the old one through ``pyrsistent``.
Comparing two candidate states therefore never risks aliasing.

Design notes:

* ``position`` is a persistent map keyed by portal name. A complete state has
    one entry per portal of the :class:`~portal_linker.problem.Problem`.
* No scores or caches are stored here; cost evaluation lives in
    :mod:`portal_linker.systems.cost` and returns its own breakdown.
"""

from dataclasses import dataclass
from typing import Mapping, Tuple

from pyrsistent import pmap
from pyrsistent.typing import PMap

from portal_linker.components import Position
from portal_linker.types import PortalName


@dataclass(frozen=True)
class State:
    """Portal position assignment.

    Attributes:
        position (PMap[PortalName, Position]): Current block position of each
            portal.
    """

    position: PMap[PortalName, Position] = pmap()

    def move(self, name: PortalName, pos: Position) -> "State":
        """Return a new state with ``name`` placed at ``pos``."""
        return State(position=self.position.set(name, pos))


def create_state(positions: Mapping[PortalName, Tuple[int, int, int]]) -> State:
    """Build a state from ``{name: (x, y, z)}`` tuples."""
    return State(
        position=pmap({name: Position(*xyz) for name, xyz in positions.items()})
    )
