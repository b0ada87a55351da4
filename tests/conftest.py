"""
Pytest will auto-discover / import this file called 'conftest.py'. ]
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Any, Callable, Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.models import ShipModel
from src.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

# (name, length, x, y, orientation)
ShipEntry = tuple[str, int, int, int, str]
LayoutFactory = Callable[[list[ShipEntry]], dict[str, Any]]


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


def _cells_of(entry: ShipEntry) -> list[tuple[int, int]]:
    _, length, x, y, orientation = entry
    if orientation == "horizontal":
        return [(x + i, y) for i in range(length)]
    return [(x, y + i) for i in range(length)]


@pytest.fixture
def make_layout() -> LayoutFactory:
    """
    Call the inner function with a list of ship entries to get a ships layout (as sent by a client):
    {"ships": [...], "board_cells": 10x10 grid with `ship` on every occupied cell}
    """

    def _make_layout(entries: list[ShipEntry]) -> dict[str, Any]:
        grid = [["empty"] * 10 for _ in range(10)]
        ships = []
        for entry in entries:
            name, length, x, y, orientation = entry
            for cx, cy in _cells_of(entry):
                grid[cy][cx] = "ship"
            ships.append(
                {
                    "name": name,
                    "length": length,
                    "position": {"x": x, "y": y},
                    "orientation": orientation,
                    "sunk": False,
                }
            )
        return {"ships": ships, "board_cells": grid}

    return _make_layout


@pytest.fixture
def carrier_layout(make_layout: LayoutFactory) -> dict[str, Any]:
    """A single length-5 carrier, horizontal, head at (0, 0)."""
    return make_layout([("carrier", 5, 0, 0, "horizontal")])


@pytest.fixture
def empty_layout(make_layout: LayoutFactory) -> dict[str, Any]:
    return make_layout([])


@pytest.fixture
def layout_to_models() -> Callable[[dict[str, Any]], tuple[list[ShipModel], list[list[str]]]]:
    """Split a client layout into what the domain layer uses: (ships, cell grid)"""

    def _convert(layout: dict[str, Any]) -> tuple[list[ShipModel], list[list[str]]]:
        ships = [ShipModel.from_dict(ship) for ship in layout["ships"]]
        grid = [list(row) for row in layout["board_cells"]]
        return ships, grid

    return _convert
