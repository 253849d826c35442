"""Cost function.

``evaluate_cost`` scores a state as

    link_violations * link_penalty
    + position_violations * POSITION_VIOLATION_PENALTY
    + optimization_weight * sum(goal.weight * distance_sq)

``link_penalty`` is 1 when ``optimization_weight`` is 0, so the Stage 1
objective is literally the number of broken links (plus any position
violations, which generated states never have). Goal distances are measured
in the Dimension A frame.
"""

from dataclasses import dataclass

from portal_linker.components import Goal, Point, PortalPairGoal
from portal_linker.config import LINK_VIOLATION_PENALTY, POSITION_VIOLATION_PENALTY
from portal_linker.problem import Problem
from portal_linker.state import State
from portal_linker.systems.link import count_link_violations
from portal_linker.types import Dimension, PortalName
from portal_linker.utils.math import distance_sq, to_dimension_a
from portal_linker.utils.region import satisfies_position_constraints


@dataclass(frozen=True)
class CostBreakdown:
    """Result of one cost evaluation.

    Attributes:
        total: Scalar cost (what the annealer compares).
        link_violations: Desired links that do not hold.
        position_violations: Portals outside their allowed regions.
        objective: Weighted goal distance sum (0 when optimization is off).
    """

    total: float
    link_violations: int
    position_violations: int
    objective: float

    @property
    def violations(self) -> int:
        return self.link_violations + self.position_violations


def portal_in_dimension_a(problem: Problem, state: State, name: PortalName) -> Point:
    return to_dimension_a(
        state.position[name],
        problem.portals[name].dimension,
        problem.dimensions[Dimension.A].scale,
    )


def goal_distance_sq(problem: Problem, state: State, goal: Goal) -> float:
    """Squared distance between the goal's operands in the Dimension A frame."""
    if isinstance(goal, PortalPairGoal):
        return distance_sq(
            portal_in_dimension_a(problem, state, goal.first),
            portal_in_dimension_a(problem, state, goal.second),
        )
    return distance_sq(portal_in_dimension_a(problem, state, goal.portal), goal.target)


def count_position_violations(problem: Problem, state: State) -> int:
    return sum(
        1
        for name in problem.portal_names
        if not satisfies_position_constraints(
            problem.portals[name], state.position[name]
        )
    )


def evaluate_cost(
    problem: Problem, state: State, optimization_weight: float = 1.0
) -> CostBreakdown:
    link_violations = count_link_violations(problem, state)
    position_violations = count_position_violations(problem, state)

    link_penalty = LINK_VIOLATION_PENALTY if optimization_weight > 0 else 1.0
    total = link_violations * link_penalty
    total += position_violations * POSITION_VIOLATION_PENALTY

    objective = 0.0
    if optimization_weight > 0:
        for goal in problem.goals:
            objective += (
                goal_distance_sq(problem, state, goal)
                * goal.weight
                * optimization_weight
            )
        total += objective

    return CostBreakdown(
        total=total,
        link_violations=link_violations,
        position_violations=position_violations,
        objective=objective,
    )


def cost(problem: Problem, state: State, optimization_weight: float = 1.0) -> float:
    return evaluate_cost(problem, state, optimization_weight).total
