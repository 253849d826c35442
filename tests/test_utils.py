from typing import Dict, Iterable, List, Sequence, Tuple

from pyrsistent import pvector

from portal_linker.components import (
    DesiredLink,
    Goal,
    Portal,
    Position,
    Region,
)
from portal_linker.problem import Problem, create_problem
from portal_linker.state import State, create_state
from portal_linker.types import Dimension, Facing

Box = Tuple[int, int, int, int, int, int]

# Large enough that any test coordinate is inside.
WORLD: Box = (-1000, -64, -1000, 1000, 320, 1000)


def make_region(box: Box) -> Region:
    return Region(min=Position(*box[:3]), max=Position(*box[3:]))


def make_portal(
    name: str,
    dimension: Dimension,
    facing: Facing = Facing.X,
    inclusive: Sequence[Box] = (WORLD,),
    exclusive: Sequence[Box] = (),
) -> Portal:
    return Portal(
        name=name,
        dimension=dimension,
        facing=facing,
        inclusive=pvector(make_region(b) for b in inclusive),
        exclusive=pvector(make_region(b) for b in exclusive),
    )


def make_problem(
    portals: Iterable[Portal],
    links: Iterable[Tuple[str, str]] = (),
    goals: Iterable[Goal] = (),
    entity_size: float = 1.0,
) -> Problem:
    return create_problem(
        portals=portals,
        links=[DesiredLink(source=s, destination=d) for s, d in links],
        goals=goals,
        entity_size=entity_size,
    )


def make_pair_problem(
    a_facing: Facing = Facing.X,
    b_facing: Facing = Facing.X,
    goals: Iterable[Goal] = (),
) -> Problem:
    """One portal per dimension ("Over" in A, "Under" in B) linked both ways."""
    return make_problem(
        [
            make_portal("Over", Dimension.A, a_facing),
            make_portal("Under", Dimension.B, b_facing),
        ],
        links=[("Over", "Under"), ("Under", "Over")],
        goals=goals,
    )


def make_state(positions: Dict[str, Tuple[int, int, int]]) -> State:
    return create_state(positions)


def changed_portals(before: State, after: State) -> List[str]:
    return sorted(
        name
        for name in before.position
        if before.position[name] != after.position.get(name)
    )

