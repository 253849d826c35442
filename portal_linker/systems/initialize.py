"""Random initial placement.

Each portal independently gets a uniform random block inside one of its
inclusive regions that also avoids all of its exclusive regions. Failing to
place any single portal aborts the whole initialization; a partially placed
state is never returned.
"""

import random

from pyrsistent import pmap

from portal_linker.errors import InitializationError
from portal_linker.problem import Problem
from portal_linker.state import State
from portal_linker.utils.region import sample_valid_position


def initialize_state(
    problem: Problem, rng: random.Random, attempts: int = 100
) -> State:
    """Return a state satisfying every portal's position constraints.

    Raises:
        InitializationError: If ``attempts`` draws all landed in exclusive
            regions for some portal.
    """
    positions = {}
    for name in problem.portal_names:
        pos = sample_valid_position(problem.portals[name], rng, attempts)
        if pos is None:
            raise InitializationError(name, attempts)
        positions[name] = pos
    return State(position=pmap(positions))
