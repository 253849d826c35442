from dataclasses import dataclass

from .position import Position


@dataclass(frozen=True)
class Region:
    """Axis-aligned box of block positions, inclusive on every face.

    Attributes:
        min: Lowest corner.
        max: Highest corner; must be ``>= min`` on every axis.
    """

    min: Position
    max: Position

    def __post_init__(self) -> None:
        if (
            self.min.x > self.max.x
            or self.min.y > self.max.y
            or self.min.z > self.max.z
        ):
            raise ValueError(
                f"Region min {self.min} must be <= max {self.max} on every axis"
            )

    def contains(self, pos: Position) -> bool:
        return (
            self.min.x <= pos.x <= self.max.x
            and self.min.y <= pos.y <= self.max.y
            and self.min.z <= pos.z <= self.max.z
        )
