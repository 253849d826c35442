"""Plain-text report of a :class:`~portal_linker.solve.SolveResult`."""

from typing import List

from portal_linker.problem import Problem
from portal_linker.solve import SolveResult
from portal_linker.verify import ProbeDistance, Verification

PROBE_DISTANCE_HEADER = (
    "Calculated distances (distSq & dist) from the Floored Scaled Position (Bd) "
    "of the source portal's center entity position to the destination portal's "
    "actual position (DestPos).\n"
    "Lower distances generally mean more stable links.\n"
)


def render_positions(problem: Problem, result: SolveResult) -> List[str]:
    if result.state is None:
        return ["No solution found."]
    lines = ["--- Portal Positions ---"]
    for name, pos in sorted(result.state.position.items()):
        portal = problem.portals[name]
        lines.append(
            f"{name} ({portal.dimension}, Face {portal.facing}):\t"
            f"({pos.x}, {pos.y}, {pos.z})"
        )
    return lines


def render_violations(verification: Verification) -> List[str]:
    lines = ["--- Violated Constraints ---"]
    if verification.violated_positions:
        lines.append(
            "Position Constraints Violated: "
            + ", ".join(verification.violated_positions)
        )
    if verification.violated_links:
        lines.append(
            "Desired Links Violated: "
            + "; ".join(str(link) for link in verification.violated_links)
        )
    return lines


def render_goal_distances(verification: Verification) -> List[str]:
    lines = ["--- Optimization Goal Distances ---"]
    for goal in verification.goal_distances:
        lines.append(
            f"{goal.label} (Weight: {goal.weight:.1f}): "
            f"{goal.linear:.2f} (Sq: {goal.squared:.2f})"
        )
    return lines


def render_probe_distance(distance: ProbeDistance) -> List[str]:
    t, d = distance.target, distance.position
    return [
        f"{distance.key}:",
        f"  Bd: ({t.x}, {t.y}, {t.z}) -> DestPos: ({d.x}, {d.y}, {d.z})",
        f"  Distance: {distance.linear:.1f} (Sq: {distance.squared:.0f})",
    ]


def render_probe_distances(verification: Verification) -> str:
    lines = [PROBE_DISTANCE_HEADER]
    for distance in sorted(verification.probe_distances, key=lambda d: d.key):
        lines.extend(render_probe_distance(distance))
        lines.append("")
    return "\n".join(lines)


def render_result(problem: Problem, result: SolveResult) -> str:
    """Full report: status, positions, violations and goal distances."""
    lines = [
        f"Solver Status: {result.message}",
        f"Success: {str(result.success).lower()}",
        "",
    ]
    lines.extend(render_positions(problem, result))
    verification = result.verification
    if verification is not None:
        if not verification.success:
            lines.append("")
            lines.extend(render_violations(verification))
        if verification.goal_distances:
            lines.append("")
            lines.extend(render_goal_distances(verification))
    return "\n".join(lines) + "\n"
