"""Solver entry point.

:func:`solve` is the single public way to run the optimizer. It wires the
stages together as a small state machine::

    Init -> Stage1Search -> Feasible -> Stage2Optimize -> Done
                         \\-> Stage1Exhausted -> Done (failure)

and always returns a :class:`SolveResult`; solver outcomes are data, not
exceptions. Problem validation errors are raised earlier, when the
:class:`~portal_linker.problem.Problem` is built.
"""

import logging
import random
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Optional

from portal_linker.annealing import (
    AcceptFn,
    silent_progress,
    silent_status,
    optimize_feasible,
    search_feasible,
)
from portal_linker.config import SolverConfig
from portal_linker.errors import InitializationError
from portal_linker.problem import Problem
from portal_linker.state import State
from portal_linker.systems.cost import evaluate_cost
from portal_linker.types import ProgressFn, StatusFn
from portal_linker.verify import Verification, verify_solution

_LOGGER = logging.getLogger(__name__)


class SolveStatus(StrEnum):
    """How a solve run ended."""

    SUCCESS = auto()
    INITIALIZATION_FAILED = auto()
    INFEASIBLE = auto()
    INTERNAL_ERROR = auto()
    CANCELLED = auto()


@dataclass(frozen=True)
class SolveResult:
    """Outcome of :func:`solve`.

    Attributes:
        status: Terminal status.
        message: Human-readable summary.
        state: Final positions. Best-effort (minimum violations) when Stage 1
            failed; ``None`` only if initialization failed.
        verification: Diagnostics recomputed for ``state``.
        violations: Weight-0 cost of ``state`` (broken links plus position
            violations).
        cost: Full cost of ``state``.
    """

    status: SolveStatus
    message: str
    state: Optional[State] = None
    verification: Optional[Verification] = None
    violations: float = 0.0
    cost: float = 0.0

    @property
    def success(self) -> bool:
        return self.status == SolveStatus.SUCCESS


def _result(
    problem: Problem, state: State, status: SolveStatus, message: str
) -> SolveResult:
    return SolveResult(
        status=status,
        message=message,
        state=state,
        verification=verify_solution(problem, state),
        violations=evaluate_cost(problem, state, 0).total,
        cost=evaluate_cost(problem, state, 1.0).total,
    )


def solve(
    problem: Problem,
    config: SolverConfig = SolverConfig(),
    rng: Optional[random.Random] = None,
    status_fn: StatusFn = silent_status,
    progress_fn: ProgressFn = silent_progress,
    on_accept: Optional[AcceptFn] = None,
) -> SolveResult:
    """Place every portal so all desired links hold, then optimize goals.

    Args:
        problem: Validated problem.
        config: Annealing parameters.
        rng: Random source; defaults to ``random.Random(config.seed)``.
        status_fn: Receives stage messages.
        progress_fn: Receives ``(iteration, bound, temperature, best_metric)``
            periodically. Returning a truthy value cancels the run; the best
            state found so far is returned with status ``CANCELLED``.
        on_accept: Stage 2 instrumentation hook, see
            :func:`portal_linker.annealing.optimize_feasible`.

    Returns:
        SolveResult: Status, positions and diagnostics.
    """
    if rng is None:
        rng = random.Random(config.seed)

    status_fn("Initializing...")
    try:
        stage1 = search_feasible(problem, config, rng, status_fn, progress_fn)
    except InitializationError as exc:
        _LOGGER.error("%s", exc)
        status_fn(
            "Initialization Failed: Could not find valid starting positions "
            "for all portals."
        )
        return SolveResult(
            status=SolveStatus.INITIALIZATION_FAILED,
            message=f"Initialization failed (position constraints): {exc}",
        )

    assert stage1.best_state is not None
    if stage1.cancelled:
        status_fn("Cancelled during Stage 1.")
        return _result(
            problem,
            stage1.best_state,
            SolveStatus.CANCELLED,
            f"Cancelled during Stage 1 (min violations = {stage1.best_metric:g}). "
            "Best attempt shown.",
        )

    if not stage1.feasible:
        message = (
            f"Stage 1 Failed: Could not find state satisfying all link constraints "
            f"(min violations = {stage1.best_metric:g}). Best attempt shown."
        )
        _LOGGER.info("%s", message)
        status_fn(
            f"Stage 1 Failed after {config.stage1_max_attempts} attempts: Could not "
            f"find feasible solution. Min violations found: {stage1.best_metric:g}."
        )
        return _result(problem, stage1.best_state, SolveStatus.INFEASIBLE, message)

    _LOGGER.info("Stage 1 complete; starting Stage 2 optimization")
    status_fn(
        "Stage 1 Complete: Feasible solution found. "
        "Starting Stage 2 Optimization."
    )
    stage2 = optimize_feasible(
        problem, stage1.best_state, config, rng, progress_fn, on_accept
    )
    assert stage2.best_state is not None

    status_fn("Optimization finished. Verifying best solution...")
    final_violations = evaluate_cost(problem, stage2.best_state, 0).total
    if final_violations > 0:
        _LOGGER.error(
            "INTERNAL ERROR: Stage 2 finished but best state has %g violations",
            final_violations,
        )
        return _result(
            problem,
            stage2.best_state,
            SolveStatus.INTERNAL_ERROR,
            f"Optimization finished. (Internal Error: Final state has "
            f"{final_violations:g} violations)",
        )

    if stage2.cancelled:
        return _result(
            problem,
            stage2.best_state,
            SolveStatus.CANCELLED,
            "Cancelled during Stage 2. Best feasible solution so far shown.",
        )

    _LOGGER.info("Solution found; best cost %g", stage2.best_metric)
    return _result(
        problem, stage2.best_state, SolveStatus.SUCCESS, "Solution found and optimized."
    )
