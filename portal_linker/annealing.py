"""Simulated-annealing stages.

Stage 1 (:func:`search_feasible`) minimises the number of broken links from
random starts, allowing large jumps and occasionally accepting worse states.
Stage 2 (:func:`optimize_feasible`) starts from a feasible state and
minimises the weighted goal distances while treating feasibility as a hard
filter: an infeasible neighbor is discarded before it is scored.

Both stages thread their best-so-far result through an explicit
:class:`SearchProgress` value that they return; nothing is kept between
calls.
"""

import logging
import math
import random
from dataclasses import dataclass, replace
from typing import Callable, Optional

from portal_linker.config import SolverConfig
from portal_linker.errors import InitializationError
from portal_linker.problem import Problem
from portal_linker.state import State
from portal_linker.systems.cost import CostBreakdown, evaluate_cost
from portal_linker.systems.initialize import initialize_state
from portal_linker.systems.neighbor import generate_neighbor
from portal_linker.types import ProgressFn, StatusFn

_LOGGER = logging.getLogger(__name__)

AcceptFn = Callable[[State, CostBreakdown], None]


def silent_status(message: str) -> None:
    return None


def silent_progress(
    iteration: int, bound: int, temperature: float, metric: float
) -> Optional[bool]:
    return None


@dataclass(frozen=True)
class SearchProgress:
    """Best result of a stage so far.

    Attributes:
        best_state: Lowest-metric state seen (``None`` before any state).
        best_metric: Its metric: violation count in Stage 1, full cost in
            Stage 2.
        feasible: Stage 1 reached zero violations with ``best_state``.
        cancelled: The progress callback asked to stop.
    """

    best_state: Optional[State] = None
    best_metric: float = math.inf
    feasible: bool = False
    cancelled: bool = False

    def offer(self, state: State, metric: float) -> "SearchProgress":
        """Return progress updated with ``state`` if it strictly improves."""
        if metric < self.best_metric:
            return replace(self, best_state=state, best_metric=metric)
        return self


def accept_violation_change(
    delta: float, temperature: float, base_probability: float, rng: random.Random
) -> bool:
    """Stage 1 rule: never refuse an equal or lower violation count."""
    if delta <= 0:
        return True
    return rng.random() < base_probability * math.exp(-delta / temperature)


def accept_cost_change(delta: float, temperature: float, rng: random.Random) -> bool:
    """Metropolis rule used by Stage 2."""
    if delta < 0:
        return True
    return rng.random() < math.exp(-delta / temperature)


def _anneal_violations(
    problem: Problem,
    start: State,
    config: SolverConfig,
    rng: random.Random,
    progress: SearchProgress,
    attempt: int,
    status_fn: StatusFn,
    progress_fn: ProgressFn,
) -> SearchProgress:
    """Run one Stage 1 annealing pass from ``start``."""
    iterations = config.stage1_iterations
    temperature = config.initial_temperature * config.stage1_temperature_multiplier
    current = start
    current_violations = evaluate_cost(problem, current, 0).total
    progress = progress.offer(current, current_violations)

    if current_violations == 0:
        status_fn(f"Stage 1 (Attempt {attempt}): Initial state is feasible!")
        return replace(progress, feasible=True)

    for i in range(iterations):
        if i % config.iterations_per_update == 0:
            status_fn(
                f"Stage 1 (Attempt {attempt}): Iter {i}/{iterations}, "
                f"Violations: {current_violations:g} "
                f"(Best Overall: {progress.best_metric:g}), Temp: {temperature:.2f}"
            )
            if progress_fn(i, iterations, temperature, progress.best_metric):
                return replace(progress, cancelled=True)

        neighbor = generate_neighbor(problem, current, rng, True, config)
        if neighbor is None:
            continue

        neighbor_violations = evaluate_cost(problem, neighbor, 0).total
        delta = neighbor_violations - current_violations
        if accept_violation_change(
            delta, temperature, config.stage1_accept_worse_probability, rng
        ):
            current, current_violations = neighbor, neighbor_violations
            progress = progress.offer(current, current_violations)
            if current_violations == 0:
                status_fn(
                    f"Stage 1 (Attempt {attempt}): Feasible solution found at iter {i}."
                )
                return replace(progress, feasible=True)

        temperature *= config.stage1_cooling_rate
        if temperature < config.absolute_temperature:
            _LOGGER.debug("Stage 1 attempt %d cooled down at iter %d", attempt, i)
            break

    status_fn(
        f"Stage 1 (Attempt {attempt}) finished. "
        f"Min violations this attempt: {current_violations:g}."
    )
    return progress


def search_feasible(
    problem: Problem,
    config: SolverConfig,
    rng: random.Random,
    status_fn: StatusFn = silent_status,
    progress_fn: ProgressFn = silent_progress,
) -> SearchProgress:
    """Stage 1: look for a state with zero violations.

    Each of ``config.stage1_max_attempts`` attempts starts from a fresh random
    state. The returned progress holds the lowest-violation state over all
    attempts; ``feasible`` tells whether it has zero violations.

    Raises:
        InitializationError: If the first attempt cannot place every portal.
            Initialization failures on later attempts skip that attempt.
    """
    progress = SearchProgress()
    for attempt in range(1, config.stage1_max_attempts + 1):
        status_fn(
            f"Stage 1 (Attempt {attempt}/{config.stage1_max_attempts}): "
            "Seeking Feasible Solution..."
        )
        try:
            start = initialize_state(problem, rng, config.init_attempts)
        except InitializationError as exc:
            if attempt == 1:
                raise
            _LOGGER.warning("Initialization failed on attempt %d: %s", attempt, exc)
            status_fn(f"Initialization Failed on attempt {attempt}. Skipping attempt.")
            continue

        progress = _anneal_violations(
            problem, start, config, rng, progress, attempt, status_fn, progress_fn
        )
        _LOGGER.info(
            "Stage 1 attempt %d/%d: best violations %g",
            attempt,
            config.stage1_max_attempts,
            progress.best_metric,
        )
        if progress.feasible or progress.cancelled:
            break
    return progress


def optimize_feasible(
    problem: Problem,
    start: State,
    config: SolverConfig,
    rng: random.Random,
    progress_fn: ProgressFn = silent_progress,
    on_accept: Optional[AcceptFn] = None,
) -> SearchProgress:
    """Stage 2: minimise the full cost without ever leaving feasibility.

    Args:
        problem: Problem being solved.
        start: Feasible state from Stage 1.
        config: Annealing parameters.
        rng: Random source.
        progress_fn: Called every ``iterations_per_update`` iterations with the
            best cost so far; a truthy return cancels the stage.
        on_accept: Optional hook called with every accepted state and its cost
            breakdown (instrumentation).

    Returns:
        SearchProgress: ``best_state`` is the lowest-cost feasible state seen.
    """
    iterations = config.stage2_iterations
    temperature = config.initial_temperature
    current = start
    current_cost = evaluate_cost(problem, current, 1.0).total
    progress = SearchProgress(
        best_state=current, best_metric=current_cost, feasible=True
    )

    for i in range(iterations):
        if i % config.iterations_per_update == 0:
            if progress_fn(i, iterations, temperature, progress.best_metric):
                return replace(progress, cancelled=True)

        neighbor = generate_neighbor(problem, current, rng, False, config)
        if neighbor is None:
            continue

        if evaluate_cost(problem, neighbor, 0).total > 0:
            continue

        breakdown = evaluate_cost(problem, neighbor, 1.0)
        if accept_cost_change(breakdown.total - current_cost, temperature, rng):
            current, current_cost = neighbor, breakdown.total
            if on_accept is not None:
                on_accept(current, breakdown)
            progress = progress.offer(current, current_cost)

        temperature *= config.cooling_rate
        if temperature < config.absolute_temperature:
            _LOGGER.debug("Stage 2 cooled down at iter %d", i)
            break

    return progress
