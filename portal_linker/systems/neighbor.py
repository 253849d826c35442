"""Neighbor generation: move exactly one portal.

Two move kinds exist:

* *Large jump* (Stage 1 only, with probability ``large_jump_chance``): the
  portal is re-sampled anywhere valid, exactly like initialization.
* *Small move*: a random offset in ``[-move_range, move_range]`` per axis
  (never all zero) is added to the current position.

Every returned state satisfies the moved portal's position constraints. When
no valid candidate is found within the retry budgets the generator returns
``None``; callers skip that iteration.
"""

import logging
import random
from typing import Optional

from portal_linker.components import Position
from portal_linker.config import SolverConfig
from portal_linker.problem import Problem
from portal_linker.state import State
from portal_linker.utils.region import (
    sample_valid_position,
    satisfies_position_constraints,
)

_LOGGER = logging.getLogger(__name__)


def small_move(
    current: Position, rng: random.Random, move_range: int
) -> Optional[Position]:
    dx = rng.randint(-move_range, move_range)
    dy = rng.randint(-move_range, move_range)
    dz = rng.randint(-move_range, move_range)
    if dx == 0 and dy == 0 and dz == 0:
        return None
    return Position(current.x + dx, current.y + dy, current.z + dz)


def generate_neighbor(
    problem: Problem,
    state: State,
    rng: random.Random,
    large_jumps: bool = False,
    config: SolverConfig = SolverConfig(),
) -> Optional[State]:
    """Propose a state differing from ``state`` in one portal's position.

    Args:
        problem: Problem supplying portal constraints.
        state: Current state (left untouched).
        rng: Random source.
        large_jumps: Allow whole-region re-sampling moves.
        config: Supplies jump chance, retry budgets and move range.

    Returns:
        Optional[State]: The neighbor, or ``None`` if no valid move was found.
    """
    if not problem.portal_names:
        return None
    name = problem.portal_names[rng.randrange(len(problem.portal_names))]
    portal = problem.portals[name]
    current = state.position[name]

    if large_jumps and rng.random() < config.large_jump_chance:
        jumped = sample_valid_position(portal, rng, config.jump_attempts)
        if jumped is not None and jumped != current:
            return state.move(name, jumped)

    for _ in range(config.move_attempts):
        candidate = small_move(current, rng, config.move_range)
        if candidate is None:
            continue
        if satisfies_position_constraints(portal, candidate):
            return state.move(name, candidate)

    _LOGGER.debug("No valid small move for portal %s from %s", name, current)
    return None
