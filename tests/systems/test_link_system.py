import pytest

from portal_linker.components import DesiredLink, Point, Position
from portal_linker.systems.link import (
    count_link_violations,
    is_link_valid,
    link_candidates,
    nearest_portal,
    probe_points,
    resolve_link,
    target_block,
)
from portal_linker.types import Dimension, Facing
from tests.test_utils import make_pair_problem, make_portal, make_problem, make_state


def test_probe_points_spread_perpendicular_to_facing() -> None:
    center, plus, minus = probe_points(Position(0, 64, 0), Facing.X, 2.0)
    assert center == Point(0.5, 64.0, 0.5)
    assert plus == Point(0.5, 64.0, 1.5)
    assert minus == Point(0.5, 64.0, -0.5)

    _, plus, minus = probe_points(Position(0, 64, 0), Facing.Z, 2.0)
    assert plus == Point(1.5, 64.0, 0.5)
    assert minus == Point(-0.5, 64.0, 0.5)


@pytest.mark.parametrize(
    "point, scale, expected",
    [
        (Point(80.5, 64.0, 160.5), 1 / 8, Position(10, 64, 20)),
        (Point(-0.5, 64.0, 0.5), 1 / 8, Position(-1, 64, 0)),
        (Point(10.5, 70.0, -3.5), 8.0, Position(84, 70, -28)),
    ],
)
def test_target_block(point: Point, scale: float, expected: Position) -> None:
    assert target_block(point, scale) == expected


def _tie_problem():
    portals = [
        make_portal("Src", Dimension.A),
        make_portal("east", Dimension.B),
        make_portal("south", Dimension.B),
        make_portal("up", Dimension.B),
        make_portal("down", Dimension.B),
    ]
    state = make_state(
        {
            "Src": (0, 0, 0),
            "east": (5, 0, 0),
            "south": (0, 0, 5),
            "up": (3, 4, 0),
            "down": (3, -4, 0),
        }
    )
    return make_problem(portals, links=[("Src", "down")]), state


def test_equal_distance_prefers_lower_y() -> None:
    problem, state = _tie_problem()
    assert resolve_link(problem, state, Point(0.5, 0.0, 0.5), Dimension.B) == "down"
    assert is_link_valid(problem, state, DesiredLink("Src", "down"))
    assert not is_link_valid(problem, state, DesiredLink("Src", "east"))


def test_full_tie_goes_to_first_declared() -> None:
    problem, state = _tie_problem()
    block = Position(0, 0, 0)
    assert nearest_portal(state, block, ("east", "south")) == "east"
    assert nearest_portal(state, block, ("south", "east")) == "south"


def test_search_radius_is_horizontal_square() -> None:
    problem = make_problem(
        [
            make_portal("Src", Dimension.A),
            make_portal("far", Dimension.B),
            make_portal("high", Dimension.B),
            make_portal("corner", Dimension.B),
        ]
    )
    state = make_state(
        {
            "Src": (0, 0, 0),
            "far": (17, 0, 0),
            "high": (0, 100, 0),
            "corner": (16, 0, -16),
        }
    )
    candidates = link_candidates(problem, state, Position(0, 0, 0), Dimension.B)
    assert candidates == ("high", "corner")


def test_no_candidate_resolves_to_none() -> None:
    problem = make_pair_problem()
    state = make_state({"Over": (0, 64, 0), "Under": (100, 64, 0)})
    assert resolve_link(problem, state, Point(0.5, 64.0, 0.5), Dimension.B) is None
    assert count_link_violations(problem, state) == 2


@pytest.mark.parametrize(
    "over, under",
    [
        ((0, 60, 0), (0, 60, 0)),
        ((80, 64, 160), (10, 64, 20)),
    ],
)
def test_pair_links_hold(over, under) -> None:
    problem = make_pair_problem()
    state = make_state({"Over": over, "Under": under})
    assert count_link_violations(problem, state) == 0


@pytest.mark.parametrize("facing, valid", [(Facing.X, True), (Facing.Z, False)])
def test_wide_entity_probes_along_portal_plane(facing: Facing, valid: bool) -> None:
    problem = make_problem(
        [
            make_portal("Src", Dimension.A, facing),
            make_portal("main", Dimension.B),
            make_portal("other", Dimension.B),
        ],
        links=[("Src", "main")],
        entity_size=16.0,
    )
    state = make_state({"Src": (0, 64, 0), "main": (0, 64, 0), "other": (1, 64, 0)})
    assert is_link_valid(problem, state, DesiredLink("Src", "main")) is valid


def test_link_predicate_is_repeatable() -> None:
    problem, state = _tie_problem()
    link = DesiredLink("Src", "down")
    snapshot = dict(state.position)
    results = {is_link_valid(problem, state, link) for _ in range(5)}
    assert results == {True}
    assert dict(state.position) == snapshot
    assert count_link_violations(problem, state) == count_link_violations(
        problem, state
    )
