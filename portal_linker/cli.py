"""Command-line entry point: ``portal-linker PROBLEM [options]``.

Exit codes: 0 on success, 1 when the solver could not produce a valid
solution, 2 for unreadable or invalid input.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional

from portal_linker.commands import placement_commands
from portal_linker.config import SolverConfig, load_solver_config
from portal_linker.errors import InvalidProblemError, ProblemParseError
from portal_linker.parser import parse_problem
from portal_linker.render import render_probe_distances, render_result
from portal_linker.solve import solve

_LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portal-linker",
        description="Place linked portals so every desired link resolves correctly.",
    )
    parser.add_argument(
        "problem",
        help="Problem description file ('-' reads standard input).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with solver parameters.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (overrides the config file).",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=None,
        help="Total iteration budget (overrides the config file).",
    )
    parser.add_argument(
        "--commands",
        action="store_true",
        help="Print placement commands after the report.",
    )
    parser.add_argument(
        "--probe-distances",
        action="store_true",
        help="Print probe distances for every cross-dimension portal pair.",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true")
    verbosity.add_argument("-q", "--quiet", action="store_true")
    return parser


def _read_problem_text(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _solver_config(args: argparse.Namespace) -> SolverConfig:
    config = load_solver_config(args.config) if args.config else SolverConfig()
    overrides = {}
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.max_iterations is not None:
        overrides["max_iterations"] = args.max_iterations
    return dataclasses.replace(config, **overrides)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        config = _solver_config(args)
        problem = parse_problem(_read_problem_text(args.problem))
    except (OSError, ProblemParseError, InvalidProblemError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    def progress(iteration: int, bound: int, temperature: float, metric: float) -> None:
        _LOGGER.info(
            "Iteration %d/%d (%.1f%%) | Temp: %.2f | Best: %.2f",
            iteration,
            bound,
            100.0 * iteration / max(bound, 1),
            temperature,
            metric,
        )

    result = solve(problem, config, status_fn=_LOGGER.info, progress_fn=progress)

    sys.stdout.write(render_result(problem, result))
    if args.probe_distances and result.verification is not None:
        sys.stdout.write("\n--- Link Distances ---\n")
        sys.stdout.write(render_probe_distances(result.verification))
    if args.commands and result.state is not None:
        sys.stdout.write("\n--- Commands ---\n")
        sys.stdout.write("\n".join(placement_commands(problem, result.state)) + "\n")
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
