import random
from typing import List

import pytest

import portal_linker.annealing as annealing
from portal_linker.annealing import (
    SearchProgress,
    accept_cost_change,
    accept_violation_change,
    optimize_feasible,
    search_feasible,
)
from portal_linker.components import PortalPairGoal
from portal_linker.config import SolverConfig
from portal_linker.errors import InitializationError
from portal_linker.state import State
from portal_linker.systems.cost import CostBreakdown, evaluate_cost
from portal_linker.types import Dimension
from tests.test_utils import make_portal, make_problem, make_state

FAST = SolverConfig(max_iterations=1_000, iterations_per_update=100)


class _FixedRandom(random.Random):
    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


def _feasible_problem():
    return make_problem(
        [
            make_portal("Base", Dimension.A, inclusive=[(0, 64, 0, 16, 64, 16)]),
            make_portal("Hub", Dimension.B, inclusive=[(0, 64, 0, 2, 64, 2)]),
        ],
        links=[("Base", "Hub"), ("Hub", "Base")],
        goals=[PortalPairGoal("Base", "Hub")],
    )


def _contested_problem():
    """One B portal asked to lead to two A portals; never feasible."""
    return make_problem(
        [
            make_portal("A1", Dimension.A, inclusive=[(0, 64, 0, 40, 64, 40)]),
            make_portal("A2", Dimension.A, inclusive=[(0, 64, 0, 40, 64, 40)]),
            make_portal("Q", Dimension.B, inclusive=[(0, 64, 0, 5, 64, 5)]),
        ],
        links=[("Q", "A1"), ("Q", "A2")],
    )


def _pinned_problem():
    return make_problem(
        [
            make_portal("Over", Dimension.A, inclusive=[(0, 64, 0, 0, 64, 0)]),
            make_portal("Under", Dimension.B, inclusive=[(100, 64, 0, 100, 64, 0)]),
        ],
        links=[("Over", "Under")],
    )


@pytest.mark.parametrize("delta", [-5.0, 0.0])
def test_stage1_never_refuses_equal_or_better(delta: float) -> None:
    assert accept_violation_change(delta, 1e-9, 0.1, _FixedRandom(0.999))


def test_stage1_worse_moves_scaled_by_base_probability() -> None:
    assert accept_violation_change(1.0, 1e9, 0.1, _FixedRandom(0.05))
    assert not accept_violation_change(1.0, 1e9, 0.1, _FixedRandom(0.2))


def test_metropolis_rule() -> None:
    assert accept_cost_change(-1.0, 1e-9, _FixedRandom(0.999))
    assert accept_cost_change(0.0, 1.0, _FixedRandom(0.999))
    assert not accept_cost_change(100.0, 1.0, _FixedRandom(0.01))


def test_search_progress_keeps_strict_improvements() -> None:
    first = make_state({"a": (0, 0, 0)})
    second = make_state({"a": (1, 0, 0)})
    progress = SearchProgress().offer(first, 2.0)
    assert progress.offer(second, 2.0).best_state == first
    assert progress.offer(second, 1.0).best_state == second


def test_search_feasible_returns_feasible_start() -> None:
    progress = search_feasible(_feasible_problem(), FAST, random.Random(0))
    assert progress.feasible
    assert progress.best_metric == 0
    assert not progress.cancelled


def test_search_feasible_reports_best_infeasible() -> None:
    problem = _contested_problem()
    progress = search_feasible(problem, FAST, random.Random(0))
    assert not progress.feasible
    assert progress.best_metric >= 1
    assert progress.best_state is not None
    assert evaluate_cost(problem, progress.best_state, 0).total == progress.best_metric


def test_search_feasible_cancels_on_progress_request() -> None:
    progress = search_feasible(
        _contested_problem(),
        FAST,
        random.Random(0),
        progress_fn=lambda *_: True,
    )
    assert progress.cancelled
    assert not progress.feasible


def test_skipped_iterations_do_not_cool() -> None:
    temperatures: List[float] = []

    def record(iteration, bound, temperature, metric):
        temperatures.append(temperature)

    search_feasible(_pinned_problem(), FAST, random.Random(0), progress_fn=record)
    assert len(temperatures) == 3 * 7
    assert set(temperatures) == {FAST.initial_temperature * 1.5}


def test_first_initialization_failure_propagates() -> None:
    problem = make_problem(
        [
            make_portal(
                "Boxed",
                Dimension.A,
                inclusive=[(0, 0, 0, 1, 1, 1)],
                exclusive=[(0, 0, 0, 1, 1, 1)],
            )
        ]
    )
    with pytest.raises(InitializationError):
        search_feasible(problem, FAST, random.Random(0))


def test_later_initialization_failure_skips_attempt(monkeypatch) -> None:
    real = annealing.initialize_state
    calls = []

    def flaky(problem, rng, attempts=100):
        calls.append(attempts)
        if len(calls) > 1:
            raise InitializationError("A1", attempts)
        return real(problem, rng, attempts)

    monkeypatch.setattr(annealing, "initialize_state", flaky)
    progress = search_feasible(_contested_problem(), FAST, random.Random(0))
    assert len(calls) == FAST.stage1_max_attempts
    assert progress.best_state is not None
    assert not progress.feasible


def test_stage2_only_accepts_feasible_states() -> None:
    problem = _feasible_problem()
    start = make_state({"Base": (16, 64, 16), "Hub": (0, 64, 0)})
    accepted: List[CostBreakdown] = []

    def on_accept(state: State, breakdown: CostBreakdown) -> None:
        assert evaluate_cost(problem, state, 0).total == 0
        accepted.append(breakdown)

    config = SolverConfig(max_iterations=5_000, iterations_per_update=500)
    progress = optimize_feasible(
        problem, start, config, random.Random(1), on_accept=on_accept
    )
    assert accepted
    assert all(b.violations == 0 for b in accepted)
    assert progress.best_metric <= evaluate_cost(problem, start).total
    assert evaluate_cost(problem, progress.best_state, 0).total == 0
