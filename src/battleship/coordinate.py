"""
A cell position on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.exceptions import OutOfRangeError

# Battleship is played on a 10x10 grid: (columns, rows)
BOARD_DIMENSIONS = (10, 10)


@dataclass(frozen=True)
class Coordinate:
    x: int
    y: int

    def is_within_bounds(self) -> bool:
        return (0 <= self.x < BOARD_DIMENSIONS[0]) and (
            0 <= self.y < BOARD_DIMENSIONS[1]
        )

    def assert_within_bounds(self) -> None:
        if not self.is_within_bounds():
            raise OutOfRangeError(
                f"Invalid attack coordinates: ({self.x}, {self.y}). "
                f"Both must be in 0-{BOARD_DIMENSIONS[0] - 1}."
            )

    def shifted(self, dx: int, dy: int) -> Coordinate:
        return Coordinate(self.x + dx, self.y + dy)
