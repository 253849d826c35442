"""Exceptions raised by problem construction, parsing and initialization.

Solver outcomes (infeasible, cancelled, internal error) are not exceptions;
they are reported through :class:`portal_linker.solve.SolveResult`.
"""


class InvalidProblemError(ValueError):
    """A ``Problem`` violates one of its structural invariants."""


class ProblemParseError(ValueError):
    """A line of problem text could not be parsed.

    Attributes:
        line_number: 1-based line number, or 0 for whole-problem checks run
            after the last line.
        line: Raw offending text.
        reason: What was wrong with it.
    """

    def __init__(self, line_number: int, line: str, reason: str) -> None:
        self.line_number = line_number
        self.line = line
        self.reason = reason
        if line_number > 0:
            message = f"Error parsing line {line_number}: {line}\n{reason}"
        else:
            message = reason
        super().__init__(message)


class InitializationError(RuntimeError):
    """No valid random start position was found for a portal."""

    def __init__(self, portal: str, attempts: int) -> None:
        self.portal = portal
        self.attempts = attempts
        super().__init__(
            f"Could not find initial valid position for portal {portal} "
            f"after {attempts} attempts"
        )
