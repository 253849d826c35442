"""Portal placement solver.

Finds integer block positions for a set of portals in two linked dimensions
so that every declared link resolves to its intended destination, then
minimises weighted distance goals.

Typical use::

    from portal_linker import parse_problem, solve

    problem = parse_problem(text)
    result = solve(problem)

See :mod:`portal_linker.solve` for the search itself and
:mod:`portal_linker.systems.link` for the linking rule.
"""

from portal_linker.config import DimensionConfig, SolverConfig
from portal_linker.parser import parse_problem
from portal_linker.problem import Problem, create_problem
from portal_linker.solve import SolveResult, SolveStatus, solve
from portal_linker.state import State

__all__ = [
    "DimensionConfig",
    "Problem",
    "SolveResult",
    "SolveStatus",
    "SolverConfig",
    "State",
    "create_problem",
    "parse_problem",
    "solve",
]
