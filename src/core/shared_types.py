"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    OPEN = "Open"
    ACTIVE = "Active"
    COMPLETED = "Completed"


class CellStatus(StrEnum):
    EMPTY = "empty"
    SHIP = "ship"
    HIT = "hit"
    MISS = "miss"


class Orientation(StrEnum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


# --- NOTE an attacked cell never goes back. Used by the board to reject repeated attacks.
ATTACKED_CELLS = frozenset({CellStatus.HIT, CellStatus.MISS})
