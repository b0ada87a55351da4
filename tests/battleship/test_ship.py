"""Unit tests for /src/battleship/ship.py"""

from src.battleship.ship import Coordinate, Orientation, Ship
from src.core.models import ShipModel


def test_horizontal_cells() -> None:
    ship = Ship("destroyer", 3, Coordinate(2, 5), Orientation.HORIZONTAL)
    assert ship.cells() == [Coordinate(2, 5), Coordinate(3, 5), Coordinate(4, 5)]


def test_vertical_cells() -> None:
    ship = Ship("submarine", 3, Coordinate(7, 1), Orientation.VERTICAL)
    assert ship.cells() == [Coordinate(7, 1), Coordinate(7, 2), Coordinate(7, 3)]


def test_occupies() -> None:
    ship = Ship("carrier", 5, Coordinate(0, 0), Orientation.HORIZONTAL)
    assert ship.occupies(Coordinate(4, 0))
    assert not ship.occupies(Coordinate(5, 0))
    assert not ship.occupies(Coordinate(0, 1))


def test_model_roundtrip() -> None:
    model = ShipModel(
        name="battleship", length=4, x=3, y=6, orientation="vertical", sunk=True
    )
    ship = Ship.from_model(model)
    assert ship.head == Coordinate(3, 6)
    assert ship.orientation == Orientation.VERTICAL
    assert ship.to_model() == model


def test_ship_model_dict_format() -> None:
    """Ships are persisted / sent with a nested position, same as the clients send them."""
    model = ShipModel(name="carrier", length=5, x=1, y=2, orientation="horizontal")
    data = model.to_dict()
    assert data["position"] == {"x": 1, "y": 2}
    assert ShipModel.from_dict(data) == model
