"""The Game board implements all rules that affect a single player's side: the grid of cells and the fleet placed on it."""

from dataclasses import dataclass
from typing import Optional, Self

from src.battleship.coordinate import BOARD_DIMENSIONS, Coordinate
from src.battleship.ship import Ship
from src.core.exceptions import AlreadyAttackedError, InvalidLayoutError
from src.core.models import CellGrid, ShipModel
from src.core.shared_types import ATTACKED_CELLS, CellStatus


@dataclass(frozen=True)
class AttackOutcome:
    """What happened on the board after a single attack."""

    coordinate: Coordinate
    hit: bool
    sunk_ship: Optional[str] = None
    all_ships_sunk: bool = False


@dataclass
class Board:
    # grid[y][x], same orientation as the cell grid sent by clients
    grid: list[list[CellStatus]]
    ships: list[Ship]

    @classmethod
    def place_board(cls, ships: list[ShipModel], cell_grid: CellGrid) -> Self:
        """
        Construct a board from a client-supplied fleet and 10x10 grid of cell states.

        Only the shape of the grid and the cell values are checked.
        Ship geometry / overlap is the client's responsibility.
        """
        columns, rows = BOARD_DIMENSIONS
        if len(cell_grid) != rows or any(len(row) != columns for row in cell_grid):
            raise InvalidLayoutError(
                f"Board cells must be a {rows}x{columns} grid of cell states."
            )
        try:
            grid = [[CellStatus(cell) for cell in row] for row in cell_grid]
            fleet = [Ship.from_model(ship) for ship in ships]
        except ValueError as e:
            raise InvalidLayoutError(f"Invalid ship layout: {e}") from e
        return cls(grid, fleet)

    @classmethod
    def deploy_fleet(cls, ships: list[ShipModel], cell_grid: CellGrid) -> Self:
        """
        Board of a player entering a game (create / join).

        Nothing has been attacked yet: only `empty` and `ship` cells are accepted, and every ship starts afloat.
        """
        board = cls.place_board(ships, cell_grid)
        attacked = [
            (x, y)
            for y, row in enumerate(board.grid)
            for x, cell in enumerate(row)
            if cell in ATTACKED_CELLS
        ]
        if attacked:
            x, y = attacked[0]
            raise InvalidLayoutError(
                f"A new board cannot contain attacked cells, found {board.grid[y][x]} at ({x}, {y})."
            )
        for ship in board.ships:
            ship.sunk = False
        return board

    @classmethod
    def empty(cls) -> Self:
        """Board of the side that has not joined yet."""
        columns, rows = BOARD_DIMENSIONS
        return cls([[CellStatus.EMPTY] * columns for _ in range(rows)], [])

    def to_grid(self) -> CellGrid:
        return [[cell.value for cell in row] for row in self.grid]

    def ship_models(self) -> list[ShipModel]:
        return [ship.to_model() for ship in self.ships]

    def cell(self, coordinate: Coordinate) -> CellStatus:
        return self.grid[coordinate.y][coordinate.x]

    def is_attacked(self, coordinate: Coordinate) -> bool:
        return self.cell(coordinate) in ATTACKED_CELLS

    def apply_attack(self, coordinate: Coordinate) -> AttackOutcome:
        """
        Resolve an attack on this board
        ----

        1. coordinates must be on the board, and not attacked before
        2. a cell covered by a ship (or marked `ship`) becomes `hit`, any other cell becomes `miss`
        3. on a hit, the ship covering the cell is sunk once all of its cells are hit
        """
        coordinate.assert_within_bounds()
        if self.is_attacked(coordinate):
            raise AlreadyAttackedError(
                f"This cell has already been attacked: ({coordinate.x}, {coordinate.y})"
            )

        if not self._is_occupied(coordinate):
            self._set_cell(coordinate, CellStatus.MISS)
            return AttackOutcome(coordinate, hit=False)

        self._set_cell(coordinate, CellStatus.HIT)
        sunk_ship = self._sink_ship_at(coordinate)
        return AttackOutcome(
            coordinate,
            hit=True,
            sunk_ship=sunk_ship.name if sunk_ship else None,
            all_ships_sunk=self.all_ships_sunk(),
        )

    def all_ships_sunk(self) -> bool:
        """A board without a fleet can never be defeated."""
        return len(self.ships) > 0 and all(ship.sunk for ship in self.ships)

    def remaining_ships(self) -> list[Ship]:
        return [ship for ship in self.ships if not ship.sunk]

    # -- PRIVATE HELPERS ---
    def _set_cell(self, coordinate: Coordinate, status: CellStatus) -> None:
        self.grid[coordinate.y][coordinate.x] = status

    def _is_occupied(self, coordinate: Coordinate) -> bool:
        """Ship geometry decides, the cell grid sent by the client cannot hide a ship."""
        return self.cell(coordinate) == CellStatus.SHIP or any(
            ship.occupies(coordinate) for ship in self.ships
        )

    def _is_ship_destroyed(self, ship: Ship) -> bool:
        """Every on-board cell of the ship has been hit."""
        on_board = [cell for cell in ship.cells() if cell.is_within_bounds()]
        return len(on_board) > 0 and all(
            self.cell(cell) == CellStatus.HIT for cell in on_board
        )

    def _sink_ship_at(self, coordinate: Coordinate) -> Optional[Ship]:
        """Mark the first not-yet-sunk ship covering the coordinate as sunk, if it is destroyed."""
        ship = next(
            (s for s in self.remaining_ships() if s.occupies(coordinate)),
            None,
        )
        if ship is None or not self._is_ship_destroyed(ship):
            return None
        ship.sunk = True
        return ship
