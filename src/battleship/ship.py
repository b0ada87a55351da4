"""Defines a ship in a player's fleet"""

from dataclasses import dataclass
from typing import Self

from src.battleship.coordinate import Coordinate
from src.core.models import ShipModel
from src.core.shared_types import Orientation

# Unit step along the ship's body, starting at its head.
DIRECTION: dict[Orientation, tuple[int, int]] = {
    Orientation.HORIZONTAL: (1, 0),
    Orientation.VERTICAL: (0, 1),
}


@dataclass
class Ship:
    name: str
    length: int
    head: Coordinate
    orientation: Orientation
    sunk: bool = False

    @classmethod
    def from_model(cls, model: ShipModel) -> Self:
        return cls(
            name=model.name,
            length=model.length,
            head=Coordinate(model.x, model.y),
            orientation=Orientation(model.orientation),
            sunk=model.sunk,
        )

    def to_model(self) -> ShipModel:
        return ShipModel(
            name=self.name,
            length=self.length,
            x=self.head.x,
            y=self.head.y,
            orientation=self.orientation.value,
            sunk=self.sunk,
        )

    def cells(self) -> list[Coordinate]:
        """All cells the ship occupies. NOTE: placement is trusted, so cells can fall outside the board."""
        dx, dy = DIRECTION[self.orientation]
        return [self.head.shifted(dx * i, dy * i) for i in range(self.length)]

    def occupies(self, coordinate: Coordinate) -> bool:
        return coordinate in self.cells()
