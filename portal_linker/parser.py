"""Text problem format.

Line-oriented; blank lines and ``#`` comments are ignored and directive names
are case-insensitive::

    ENTITY_SIZE <float>
    PORTAL <name> <A|B> <X|Z>
    POS <name> <INC|EXC> <minX> <minY> <minZ> <maxX> <maxY> <maxZ>
    LINK <source> <dest>
    OPTIMIZE <p1> <p2> [weight]
    OPTIMIZE_POS <p> <x> <y> <z> [weight]

Portals must be declared before they are referenced. Every portal needs at
least one ``POS ... INC`` region. Any error raises
:class:`~portal_linker.errors.ProblemParseError` carrying the 1-based line
number and raw line; no partially built problem is ever returned.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Optional

from pyrsistent import pvector
from pyrsistent.typing import PMap

from portal_linker.components import (
    DesiredLink,
    Goal,
    Point,
    Portal,
    PortalPairGoal,
    PortalPointGoal,
    Position,
    Region,
)
from portal_linker.config import DimensionConfig
from portal_linker.errors import InvalidProblemError, ProblemParseError
from portal_linker.problem import Problem, create_problem
from portal_linker.types import Dimension, Facing, RegionKind

_LOGGER = logging.getLogger(__name__)


@dataclass
class _ProblemBuilder:
    """Mutable accumulator filled line by line, frozen into a Problem at the end."""

    entity_size: float = 1.0
    portals: Dict[str, Portal] = field(default_factory=dict)
    links: List[DesiredLink] = field(default_factory=list)
    goals: List[Goal] = field(default_factory=list)

    def require_portal(self, name: str, context: str) -> Portal:
        if name not in self.portals:
            raise ValueError(f"Unknown portal '{name}' in {context}")
        return self.portals[name]


def _parse_float(token: str, what: str) -> float:
    try:
        value = float(token)
    except ValueError:
        raise ValueError(f"Invalid {what} '{token}'") from None
    if not math.isfinite(value):
        raise ValueError(f"Invalid {what} '{token}'")
    return value


def _parse_int(token: str, what: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise ValueError(f"Invalid {what} '{token}' (integer expected)") from None


def _parse_weight(token: str, context: str) -> float:
    weight = _parse_float(token, "weight")
    if weight < 0:
        raise ValueError(f"Invalid or negative weight '{token}' for {context}")
    return weight


def _entity_size(builder: _ProblemBuilder, args: List[str]) -> None:
    if len(args) != 1:
        raise ValueError("Invalid ENTITY_SIZE format")
    size = _parse_float(args[0], "ENTITY_SIZE")
    if size <= 0:
        raise ValueError("ENTITY_SIZE must be positive")
    builder.entity_size = size


def _portal(builder: _ProblemBuilder, args: List[str]) -> None:
    if len(args) != 3:
        raise ValueError("Invalid PORTAL format")
    name, dim, face = args
    if name in builder.portals:
        raise ValueError(f"Duplicate portal name: {name}")
    try:
        dimension = Dimension(dim.upper())
    except ValueError:
        raise ValueError(f"Invalid dimension '{dim}' for portal {name}") from None
    try:
        facing = Facing(face.upper())
    except ValueError:
        raise ValueError(f"Invalid facing '{face}' for portal {name}") from None
    builder.portals[name] = Portal(name=name, dimension=dimension, facing=facing)


def _pos(builder: _ProblemBuilder, args: List[str]) -> None:
    if len(args) != 8:
        raise ValueError("Invalid POS format")
    name, kind_token = args[0], args[1]
    portal = builder.require_portal(name, "POS constraint")
    try:
        kind = RegionKind(kind_token.upper())
    except ValueError:
        raise ValueError(f"Invalid POS type '{kind_token}'") from None
    what = f"coordinate in POS constraint for {name}"
    coords = [_parse_int(token, what) for token in args[2:]]
    try:
        region = Region(min=Position(*coords[:3]), max=Position(*coords[3:]))
    except ValueError:
        raise ValueError(
            f"Min coordinates must be <= Max coordinates in POS constraint for {name}"
        ) from None
    if kind == RegionKind.INC:
        portal = replace(portal, inclusive=portal.inclusive.append(region))
    else:
        portal = replace(portal, exclusive=portal.exclusive.append(region))
    builder.portals[name] = portal


def _link(builder: _ProblemBuilder, args: List[str]) -> None:
    if len(args) != 2:
        raise ValueError("Invalid LINK format")
    source = builder.require_portal(args[0], "LINK (source)")
    dest = builder.require_portal(args[1], "LINK (destination)")
    if source.dimension == dest.dimension:
        raise ValueError(
            f"LINK source '{source.name}' ({source.dimension}) and destination "
            f"'{dest.name}' ({dest.dimension}) must be in different dimensions"
        )
    builder.links.append(DesiredLink(source=source.name, destination=dest.name))


def _optimize(builder: _ProblemBuilder, args: List[str]) -> None:
    if len(args) not in (2, 3):
        raise ValueError("Invalid OPTIMIZE format")
    first = builder.require_portal(args[0], "OPTIMIZE").name
    second = builder.require_portal(args[1], "OPTIMIZE").name
    weight = 1.0
    if len(args) == 3:
        weight = _parse_weight(args[2], f"OPTIMIZE {first} {second}")
    builder.goals.append(PortalPairGoal(first=first, second=second, weight=weight))


def _optimize_pos(builder: _ProblemBuilder, args: List[str]) -> None:
    if len(args) not in (4, 5):
        raise ValueError("Invalid OPTIMIZE_POS format")
    name = builder.require_portal(args[0], "OPTIMIZE_POS").name
    what = f"coordinate in OPTIMIZE_POS for {name}"
    x, y, z = (_parse_float(token, what) for token in args[1:4])
    weight = 1.0
    if len(args) == 5:
        weight = _parse_weight(args[4], f"OPTIMIZE_POS {name}")
    builder.goals.append(
        PortalPointGoal(portal=name, target=Point(x, y, z), weight=weight)
    )


DirectiveFn = Callable[[_ProblemBuilder, List[str]], None]

DIRECTIVES: Dict[str, DirectiveFn] = {
    "ENTITY_SIZE": _entity_size,
    "PORTAL": _portal,
    "POS": _pos,
    "LINK": _link,
    "OPTIMIZE": _optimize,
    "OPTIMIZE_POS": _optimize_pos,
}
"""Directive name -> handler mapping."""


def parse_problem(
    text: str, dimensions: Optional[PMap[Dimension, DimensionConfig]] = None
) -> Problem:
    """Parse problem text into a validated :class:`Problem`.

    Args:
        text: Problem description.
        dimensions: Optional override of the per-dimension matching constants.

    Raises:
        ProblemParseError: On the first malformed line, or (with line number 0)
            when a portal ends up without an inclusive region.
    """
    builder = _ProblemBuilder()
    for index, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        command, *args = line.split()
        handler = DIRECTIVES.get(command.upper())
        try:
            if handler is None:
                raise ValueError(f"Unknown command: {command.upper()}")
            handler(builder, args)
        except ValueError as exc:
            raise ProblemParseError(index, line, str(exc)) from exc

    for portal in builder.portals.values():
        if len(portal.inclusive) == 0:
            raise ProblemParseError(
                0,
                "",
                f"Portal {portal.name} has no inclusive position constraints "
                "(POS INC) defined.",
            )
    if len(builder.portals) < 2:
        _LOGGER.warning(
            "Less than two portals defined. Linking and optimization might be trivial."
        )

    try:
        return create_problem(
            portals=builder.portals.values(),
            links=pvector(builder.links),
            goals=pvector(builder.goals),
            entity_size=builder.entity_size,
            dimensions=dimensions,
        )
    except InvalidProblemError as exc:
        raise ProblemParseError(0, "", str(exc)) from exc
