"""Solver tunables and per-dimension constants.

``SolverConfig`` groups every annealing parameter; ``DimensionConfig`` holds
the coordinate scale and search radius applied when a link *arrives* in a
dimension. Both can be loaded from a YAML mapping with
:func:`load_solver_config`.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pyrsistent import pmap
from pyrsistent.typing import PMap

from portal_linker.types import Dimension


@dataclass(frozen=True)
class DimensionConfig:
    """Matching constants for a destination dimension.

    Attributes:
        scale: Factor applied to horizontal coordinates arriving in this
            dimension from the other one.
        search_radius: Half-width of the square (horizontal) candidate search
            area around the target block.
    """

    scale: float
    search_radius: int


DEFAULT_DIMENSIONS: PMap[Dimension, DimensionConfig] = pmap(
    {
        Dimension.A: DimensionConfig(scale=8.0, search_radius=128),
        Dimension.B: DimensionConfig(scale=1 / 8, search_radius=16),
    }
)

LINK_VIOLATION_PENALTY = 10_000_000_000.0
POSITION_VIOLATION_PENALTY = 10_000_000.0


@dataclass(frozen=True)
class SolverConfig:
    """Simulated-annealing parameters.

    Stage 1 (feasibility) runs ``stage1_max_attempts`` annealing passes, each
    with ``floor(max_iterations * stage1_iteration_fraction)`` iterations,
    starting at ``initial_temperature * stage1_temperature_multiplier`` and
    cooling by ``stage1_cooling_rate``. Stage 2 (optimization) gets the
    remaining iterations and starts at ``initial_temperature`` with
    ``cooling_rate``.
    """

    max_iterations: int = 100_000
    initial_temperature: float = 100_000.0
    cooling_rate: float = 0.995
    absolute_temperature: float = 0.01
    iterations_per_update: int = 5_000

    stage1_max_attempts: int = 3
    stage1_cooling_rate: float = 0.997
    stage1_temperature_multiplier: float = 1.5
    stage1_iteration_fraction: float = 0.7
    stage1_accept_worse_probability: float = 0.1
    large_jump_chance: float = 0.2

    init_attempts: int = 100
    jump_attempts: int = 10
    move_attempts: int = 50
    move_range: int = 3

    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.max_iterations <= 0:
            raise ValueError("max_iterations must be positive")
        if self.initial_temperature <= 0:
            raise ValueError("initial_temperature must be positive")
        if self.absolute_temperature <= 0:
            raise ValueError("absolute_temperature must be positive")
        if self.stage1_temperature_multiplier <= 0:
            raise ValueError("stage1_temperature_multiplier must be positive")
        if self.iterations_per_update <= 0:
            raise ValueError("iterations_per_update must be positive")
        if not 0.0 < self.cooling_rate < 1.0:
            raise ValueError("cooling_rate must be in (0, 1)")
        if not 0.0 < self.stage1_cooling_rate < 1.0:
            raise ValueError("stage1_cooling_rate must be in (0, 1)")
        if not 0.0 <= self.stage1_iteration_fraction <= 1.0:
            raise ValueError("stage1_iteration_fraction must be in [0, 1]")
        for name in ("stage1_accept_worse_probability", "large_jump_chance"):
            if not 0.0 <= getattr(self, name) <= 1.0:
                raise ValueError(f"{name} must be in [0, 1]")
        for name in ("init_attempts", "jump_attempts", "move_attempts"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")
        if self.move_range < 1:
            raise ValueError("move_range must be at least 1")
        if self.stage1_max_attempts < 1:
            raise ValueError("stage1_max_attempts must be at least 1")

    @property
    def stage1_iterations(self) -> int:
        return int(self.max_iterations * self.stage1_iteration_fraction)

    @property
    def stage2_iterations(self) -> int:
        remaining = self.max_iterations - self.stage1_iterations
        if remaining <= self.iterations_per_update:
            return int(self.max_iterations * (1.0 - self.stage1_iteration_fraction))
        return remaining


def solver_config_from_dict(data: Mapping[str, Any]) -> SolverConfig:
    """Build a ``SolverConfig`` from a plain mapping, rejecting unknown keys."""
    known = {f.name for f in dataclasses.fields(SolverConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown solver config keys: {', '.join(unknown)}")
    return SolverConfig(**dict(data))


def load_solver_config(path: str | Path) -> SolverConfig:
    """Read a YAML mapping of ``SolverConfig`` fields.

    A ``solver:`` top-level key is unwrapped if present, so the tunables can
    share a file with other settings.
    """
    with Path(path).open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"Solver config {path} must contain a mapping")
    section = payload.get("solver", payload)
    if not isinstance(section, Mapping):
        raise ValueError(f"'solver' section of {path} must be a mapping")
    return solver_config_from_dict(section)
