import random

import pytest

from portal_linker.errors import InitializationError
from portal_linker.systems.initialize import initialize_state
from portal_linker.types import Dimension
from portal_linker.utils.region import satisfies_position_constraints
from tests.test_utils import make_portal, make_problem


def _problem():
    return make_problem(
        [
            make_portal(
                "Over",
                Dimension.A,
                inclusive=[(0, 60, 0, 3, 62, 3), (50, 60, 50, 51, 60, 51)],
                exclusive=[(0, 60, 0, 3, 62, 1)],
            ),
            make_portal("Under", Dimension.B, inclusive=[(-2, 30, -2, 2, 30, 2)]),
        ]
    )


def test_initial_state_places_every_portal_validly() -> None:
    problem = _problem()
    for seed in range(20):
        state = initialize_state(problem, random.Random(seed))
        assert set(state.position) == {"Over", "Under"}
        for name in problem.portal_names:
            assert satisfies_position_constraints(
                problem.portals[name], state.position[name]
            )


def test_initial_state_is_reproducible() -> None:
    problem = _problem()
    first = initialize_state(problem, random.Random(42))
    second = initialize_state(problem, random.Random(42))
    assert first == second


def test_fully_excluded_portal_fails() -> None:
    problem = make_problem(
        [
            make_portal("Over", Dimension.A),
            make_portal(
                "Blocked",
                Dimension.B,
                inclusive=[(0, 0, 0, 2, 2, 2)],
                exclusive=[(-5, -5, -5, 5, 5, 5)],
            ),
        ]
    )
    with pytest.raises(InitializationError) as info:
        initialize_state(problem, random.Random(0), attempts=10)
    assert info.value.portal == "Blocked"
    assert info.value.attempts == 10
