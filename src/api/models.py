"""Requests and Response models"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.battleship.coordinate import BOARD_DIMENSIONS
from src.core.exceptions import InvalidLayoutError, InvalidRequestError
from src.core.models import ShipModel
from src.core.shared_types import CellStatus, Orientation, Status

PlayerId = str

MIN_PASSWORD_LENGTH = 3

# Cell states a client may send when placing its fleet
PLACEMENT_CELLS = frozenset({CellStatus.EMPTY, CellStatus.SHIP})


# --- SHARED PIECES ---
class Position(BaseModel):
    x: int
    y: int


class ShipPayload(BaseModel):
    name: str = Field(min_length=1)
    length: int = Field(gt=0)
    position: Position
    orientation: Orientation
    sunk: bool = False

    def to_model(self) -> ShipModel:
        return ShipModel(
            name=self.name,
            length=self.length,
            x=self.position.x,
            y=self.position.y,
            orientation=self.orientation.value,
            sunk=self.sunk,
        )

    @classmethod
    def from_model(cls, model: ShipModel) -> "ShipPayload":
        return cls(
            name=model.name,
            length=model.length,
            position=Position(x=model.x, y=model.y),
            orientation=Orientation(model.orientation),
            sunk=model.sunk,
        )


class ShipsLayout(BaseModel):
    """A player's fleet plus the matching grid of cell states (board_cells[y][x])."""

    ships: list[ShipPayload]
    board_cells: list[list[CellStatus]]

    @field_validator("board_cells")
    @classmethod
    def validate_board_cells(
        cls, value: list[list[CellStatus]]
    ) -> list[list[CellStatus]]:
        columns, rows = BOARD_DIMENSIONS
        if len(value) != rows or any(len(row) != columns for row in value):
            raise InvalidLayoutError(
                f"Valid ship layout and board cell status required: board_cells must be {rows}x{columns}."
            )
        if any(cell not in PLACEMENT_CELLS for row in value for cell in row):
            raise InvalidLayoutError(
                "Valid ship layout and board cell status required: a new board can only hold `empty` and `ship` cells."
            )
        return value

    def ship_models(self) -> list[ShipModel]:
        return [ship.to_model() for ship in self.ships]

    def cell_grid(self) -> list[list[str]]:
        return [[cell.value for cell in row] for row in self.board_cells]


# --- REQUEST BODIES (what the client sends) ---
class CreateGamePayload(BaseModel):
    ships_layout: ShipsLayout
    is_vs_ai: bool = False


class JoinGamePayload(BaseModel):
    ships_layout: ShipsLayout


class AttackPayload(BaseModel):
    """
    Coordinates to attack. The outcome is computed by the server:
    hit / sunk_ship_name / all_player_ships_sunk are accepted for compatibility with older clients, but only advisory.
    """

    coordinates: Position
    target_player_id: Optional[PlayerId] = None
    hit: Optional[bool] = None
    sunk_ship_name: Optional[str] = None
    all_player_ships_sunk: Optional[bool] = None


class CredentialsPayload(BaseModel):
    username: str
    password: str

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise InvalidRequestError("Please provide username and password")
        return value

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise InvalidRequestError("Please provide username and password")
        return value


# --- REQUEST MODELS (what the service receives) ---
class CreateGameRequest(BaseModel):
    player_id: PlayerId
    ships_layout: ShipsLayout
    is_vs_ai: bool = False


class JoinGameRequest(BaseModel):
    game_id: UUID
    player_id: PlayerId
    ships_layout: ShipsLayout


class AttackRequest(BaseModel):
    game_id: UUID
    player_id: PlayerId
    coordinates: Position
    target_player_id: Optional[PlayerId] = None
    hit: Optional[bool] = None
    sunk_ship_name: Optional[str] = None
    all_player_ships_sunk: Optional[bool] = None


class SurrenderRequest(BaseModel):
    game_id: UUID
    player_id: PlayerId


class GetGameRequest(BaseModel):
    game_id: UUID


class ListGamesRequest(BaseModel):
    player_id: Optional[PlayerId] = None
    type: Optional[str] = None
    status_filter: Optional[str] = None


class RegisterRequest(CredentialsPayload):
    @field_validator("password")
    @classmethod
    def validate_password_length(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise InvalidRequestError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
        return value


class LoginRequest(CredentialsPayload):
    pass


# --- RESPONSE MODELS ---
class PlayerInfo(BaseModel):
    id: PlayerId
    username: Optional[str] = None


class AttackResult(BaseModel):
    x: int
    y: int
    hit: bool
    sunk_ship: Optional[str] = None
    all_ships_sunk: bool = False


class GameResponse(BaseModel):
    game_id: UUID
    player1: PlayerInfo
    player2: Optional[PlayerInfo]
    is_vs_ai: bool
    ships1: list[ShipPayload]
    ships2: list[ShipPayload]
    board1_cells: list[list[CellStatus]]
    board2_cells: list[list[CellStatus]]
    status: Status
    turn: Optional[PlayerId]
    winner: Optional[PlayerInfo]
    player1_ready: bool
    player2_ready: bool
    created_at: Optional[datetime]
    started_at: Optional[datetime]
    ended_at: Optional[datetime]
    last_attack: Optional[AttackResult] = None


class UserResponse(BaseModel):
    id: UUID
    username: str


class AuthResponse(BaseModel):
    msg: str
    token: str
    user: UserResponse


class MessageResponse(BaseModel):
    msg: str
