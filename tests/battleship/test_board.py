"""Unit tests for /src/battleship/board.py"""

from itertools import product
from typing import Any, Callable

import pytest

from src.battleship.board import Board, CellStatus, Coordinate
from src.core.exceptions import (
    AlreadyAttackedError,
    InvalidLayoutError,
    OutOfRangeError,
)
from src.core.models import ShipModel

LayoutConverter = Callable[[dict[str, Any]], tuple[list[ShipModel], list[list[str]]]]


@pytest.fixture
def carrier_board(
    carrier_layout: dict[str, Any], layout_to_models: LayoutConverter
) -> Board:
    ships, grid = layout_to_models(carrier_layout)
    return Board.place_board(ships, grid)


@pytest.fixture
def two_ship_board(make_layout: Callable, layout_to_models: LayoutConverter) -> Board:
    layout = make_layout(
        [("destroyer", 2, 0, 0, "horizontal"), ("submarine", 3, 5, 5, "vertical")]
    )
    ships, grid = layout_to_models(layout)
    return Board.place_board(ships, grid)


# -- CREATION LOGIC --
def test_place_board(carrier_board: Board) -> None:
    assert len(carrier_board.ships) == 1
    assert carrier_board.ships[0].name == "carrier"
    assert carrier_board.cell(Coordinate(0, 0)) == CellStatus.SHIP
    assert carrier_board.cell(Coordinate(4, 0)) == CellStatus.SHIP
    assert carrier_board.cell(Coordinate(5, 0)) == CellStatus.EMPTY


def test_grid_is_indexed_by_row_then_column(
    make_layout: Callable, layout_to_models: LayoutConverter
) -> None:
    """board_cells[y][x]: a vertical ship runs down the rows."""
    ships, grid = layout_to_models(make_layout([("destroyer", 2, 3, 1, "vertical")]))
    board = Board.place_board(ships, grid)
    assert board.grid[1][3] == CellStatus.SHIP
    assert board.grid[2][3] == CellStatus.SHIP
    assert board.cell(Coordinate(3, 2)) == CellStatus.SHIP


def test_empty_board() -> None:
    board = Board.empty()
    assert board.ships == []
    assert all(cell == CellStatus.EMPTY for row in board.grid for cell in row)
    assert len(board.grid) == 10
    assert all(len(row) == 10 for row in board.grid)


def test_grid_roundtrip(carrier_layout: dict[str, Any], layout_to_models: LayoutConverter) -> None:
    ships, grid = layout_to_models(carrier_layout)
    board = Board.place_board(ships, grid)
    assert board.to_grid() == grid
    assert board.ship_models() == ships


@pytest.mark.parametrize(
    "grid",
    [
        [["empty"] * 10 for _ in range(9)],  # only 9 rows
        [["empty"] * 9 for _ in range(10)],  # only 9 columns
        [["empty"] * 10 for _ in range(11)],  # too many rows
        [],
    ],
)
def test_invalid_grid_shape(grid: list[list[str]]) -> None:
    with pytest.raises(InvalidLayoutError):
        Board.place_board([], grid)


def test_invalid_cell_value() -> None:
    grid = [["empty"] * 10 for _ in range(10)]
    grid[3][3] = "kraken"
    with pytest.raises(InvalidLayoutError):
        Board.place_board([], grid)


def test_invalid_ship_orientation() -> None:
    grid = [["empty"] * 10 for _ in range(10)]
    ship = ShipModel(name="carrier", length=5, x=0, y=0, orientation="diagonal")
    with pytest.raises(InvalidLayoutError):
        Board.place_board([ship], grid)


def test_ship_geometry_is_not_validated() -> None:
    """Placement legality is left to the client: a ship sticking out of the board is accepted as-is."""
    grid = [["empty"] * 10 for _ in range(10)]
    grid[0][8] = grid[0][9] = "ship"
    ship = ShipModel(name="carrier", length=5, x=8, y=0, orientation="horizontal")
    board = Board.place_board([ship], grid)
    assert board.ships[0].length == 5


# -- ATTACK LOGIC --
def test_attack_empty_cell_is_a_miss(carrier_board: Board) -> None:
    outcome = carrier_board.apply_attack(Coordinate(3, 3))
    assert not outcome.hit
    assert outcome.sunk_ship is None
    assert not outcome.all_ships_sunk
    assert carrier_board.cell(Coordinate(3, 3)) == CellStatus.MISS


def test_attack_ship_cell_is_a_hit(carrier_board: Board) -> None:
    outcome = carrier_board.apply_attack(Coordinate(0, 0))
    assert outcome.hit
    assert outcome.sunk_ship is None
    assert not outcome.all_ships_sunk
    assert carrier_board.cell(Coordinate(0, 0)) == CellStatus.HIT
    assert not carrier_board.ships[0].sunk


def test_ship_sinks_after_last_cell_hit(two_ship_board: Board) -> None:
    first = two_ship_board.apply_attack(Coordinate(0, 0))
    assert first.sunk_ship is None

    second = two_ship_board.apply_attack(Coordinate(1, 0))
    assert second.hit
    assert second.sunk_ship == "destroyer"
    assert not second.all_ships_sunk
    assert two_ship_board.ships[0].sunk
    assert not two_ship_board.ships[1].sunk
    assert [ship.name for ship in two_ship_board.remaining_ships()] == ["submarine"]


def test_all_ships_sunk(two_ship_board: Board) -> None:
    outcomes = [
        two_ship_board.apply_attack(Coordinate(x, y))
        for x, y in [(0, 0), (1, 0), (5, 5), (5, 6), (5, 7)]
    ]
    assert [o.all_ships_sunk for o in outcomes] == [False, False, False, False, True]
    assert outcomes[-1].sunk_ship == "submarine"
    assert two_ship_board.all_ships_sunk()


def test_board_without_fleet_is_never_defeated() -> None:
    board = Board.empty()
    outcome = board.apply_attack(Coordinate(3, 3))
    assert not outcome.all_ships_sunk
    assert not board.all_ships_sunk()


def test_ship_cells_outside_board_do_not_block_sinking() -> None:
    """Only the cells that are actually on the board need to be hit."""
    grid = [["empty"] * 10 for _ in range(10)]
    grid[0][8] = grid[0][9] = "ship"
    ship = ShipModel(name="carrier", length=5, x=8, y=0, orientation="horizontal")
    board = Board.place_board([ship], grid)
    board.apply_attack(Coordinate(8, 0))
    outcome = board.apply_attack(Coordinate(9, 0))
    assert outcome.sunk_ship == "carrier"
    assert outcome.all_ships_sunk


def test_same_name_ships_sink_independently(
    make_layout: Callable, layout_to_models: LayoutConverter
) -> None:
    """Two ships sharing a name: only the one actually destroyed is marked sunk."""
    layout = make_layout(
        [("destroyer", 2, 0, 0, "horizontal"), ("destroyer", 2, 0, 5, "horizontal")]
    )
    board = Board.place_board(*layout_to_models(layout))
    board.apply_attack(Coordinate(0, 5))
    outcome = board.apply_attack(Coordinate(1, 5))
    assert outcome.sunk_ship == "destroyer"
    assert [ship.sunk for ship in board.ships] == [False, True]


@pytest.mark.parametrize("x, y", list(product([0, 4, 9], [0, 5, 9])))
def test_repeated_attack_is_rejected(carrier_board: Board, x: int, y: int) -> None:
    """Any cell, hit or miss: the second attack fails and does not change the cell."""
    carrier_board.apply_attack(Coordinate(x, y))
    status_after_first = carrier_board.cell(Coordinate(x, y))
    with pytest.raises(AlreadyAttackedError):
        carrier_board.apply_attack(Coordinate(x, y))
    assert carrier_board.cell(Coordinate(x, y)) == status_after_first


@pytest.mark.parametrize("x, y", [(10, 0), (0, 10), (-1, 3), (3, -1)])
def test_out_of_range_attack(carrier_board: Board, x: int, y: int) -> None:
    before = carrier_board.to_grid()
    with pytest.raises(OutOfRangeError):
        carrier_board.apply_attack(Coordinate(x, y))
    assert carrier_board.to_grid() == before


# -- SHIP GEOMETRY DECIDES --
def test_hit_follows_ship_position_not_cell_grid() -> None:
    """A fleet whose cells are all marked `empty` can still be hit and sunk."""
    ship = ShipModel(name="carrier", length=5, x=0, y=0, orientation="horizontal")
    board = Board.deploy_fleet([ship], [["empty"] * 10 for _ in range(10)])

    outcomes = [board.apply_attack(Coordinate(x, 0)) for x in range(5)]

    assert [o.hit for o in outcomes] == [True] * 5
    assert outcomes[-1].sunk_ship == "carrier"
    assert outcomes[-1].all_ships_sunk
    assert board.cell(Coordinate(2, 0)) == CellStatus.HIT


def test_stray_ship_cell_is_still_a_hit(carrier_board: Board) -> None:
    """A `ship` cell outside every ship counts as a hit but sinks nothing."""
    carrier_board.grid[9][9] = CellStatus.SHIP
    outcome = carrier_board.apply_attack(Coordinate(9, 9))
    assert outcome.hit
    assert outcome.sunk_ship is None
    assert not outcome.all_ships_sunk


# -- NEW FLEETS --
@pytest.mark.parametrize("attacked", ["hit", "miss"])
def test_new_fleet_cannot_contain_attacked_cells(attacked: str) -> None:
    grid = [["empty"] * 10 for _ in range(10)]
    grid[4][7] = attacked
    with pytest.raises(InvalidLayoutError):
        Board.deploy_fleet([], grid)


def test_stored_board_keeps_attacked_cells() -> None:
    """Games read back from storage are mid-play: attacked cells are fine there."""
    grid = [["miss"] * 10 for _ in range(10)]
    board = Board.place_board([], grid)
    assert board.cell(Coordinate(4, 7)) == CellStatus.MISS


def test_new_fleet_starts_afloat() -> None:
    """A ship sent in as sunk is placed unsunk, so the first stray hit cannot end the game."""
    grid = [["empty"] * 10 for _ in range(10)]
    grid[0][0] = grid[0][1] = "ship"
    grid[5][5] = "ship"
    ship = ShipModel(name="destroyer", length=2, x=0, y=0, orientation="horizontal", sunk=True)
    board = Board.deploy_fleet([ship], grid)

    assert not board.ships[0].sunk
    outcome = board.apply_attack(Coordinate(5, 5))
    assert outcome.hit
    assert not outcome.all_ships_sunk
