import random

from portal_linker.components import Position
from portal_linker.config import SolverConfig
from portal_linker.systems.neighbor import generate_neighbor, small_move
from portal_linker.types import Dimension
from portal_linker.utils.region import satisfies_position_constraints
from tests.test_utils import changed_portals, make_portal, make_problem, make_state


class _ZeroRandom(random.Random):
    def randint(self, a: int, b: int) -> int:
        return 0


def _problem():
    return make_problem(
        [
            make_portal("Over", Dimension.A, inclusive=[(0, 60, 0, 20, 70, 20)]),
            make_portal(
                "Under",
                Dimension.B,
                inclusive=[(-5, 30, -5, 5, 40, 5)],
                exclusive=[(0, 30, 0, 0, 40, 0)],
            ),
        ]
    )


def test_small_move_never_returns_zero_offset() -> None:
    assert small_move(Position(1, 2, 3), _ZeroRandom(0), 3) is None
    moved = small_move(Position(1, 2, 3), random.Random(5), 1)
    if moved is not None:
        assert moved != Position(1, 2, 3)
        assert abs(moved.x - 1) <= 1 and abs(moved.y - 2) <= 1 and abs(moved.z - 3) <= 1


def test_neighbor_moves_exactly_one_portal_validly() -> None:
    problem = _problem()
    state = make_state({"Over": (10, 65, 10), "Under": (2, 35, 2)})
    rng = random.Random(7)
    for large_jumps in (False, True):
        for _ in range(200):
            neighbor = generate_neighbor(problem, state, rng, large_jumps)
            if neighbor is None:
                continue
            changed = changed_portals(state, neighbor)
            assert len(changed) == 1
            name = changed[0]
            assert satisfies_position_constraints(
                problem.portals[name], neighbor.position[name]
            )


def test_small_moves_stay_within_move_range() -> None:
    problem = _problem()
    state = make_state({"Over": (10, 65, 10), "Under": (2, 35, 2)})
    config = SolverConfig(move_range=2)
    rng = random.Random(11)
    for _ in range(100):
        neighbor = generate_neighbor(problem, state, rng, False, config)
        assert neighbor is not None
        for name in changed_portals(state, neighbor):
            before, after = state.position[name], neighbor.position[name]
            offsets = (after.x - before.x, after.y - before.y, after.z - before.z)
            assert max(abs(v) for v in offsets) <= 2


def test_neighbor_is_none_for_pinned_portal() -> None:
    problem = make_problem(
        [make_portal("Pinned", Dimension.A, inclusive=[(4, 64, 4, 4, 64, 4)])]
    )
    state = make_state({"Pinned": (4, 64, 4)})
    config = SolverConfig(large_jump_chance=1.0)
    rng = random.Random(3)
    for large_jumps in (False, True):
        assert generate_neighbor(problem, state, rng, large_jumps, config) is None


def test_neighbor_leaves_input_state_untouched() -> None:
    problem = _problem()
    state = make_state({"Over": (10, 65, 10), "Under": (2, 35, 2)})
    snapshot = dict(state.position)
    generate_neighbor(problem, state, random.Random(1), True)
    assert dict(state.position) == snapshot
