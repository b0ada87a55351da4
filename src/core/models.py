"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from src.core.shared_types import Status

# Type aliases to make GameModel easier to read
PlayerId = str
CellGrid = list[list[str]]


@dataclass
class ShipModel:
    """Transport-safe representation of a single ship."""

    name: str
    length: int
    x: int
    y: int
    orientation: str
    sunk: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "length": self.length,
            "position": {"x": self.x, "y": self.y},
            "orientation": self.orientation,
            "sunk": self.sunk,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShipModel":
        return cls(
            name=data["name"],
            length=data["length"],
            x=data["position"]["x"],
            y=data["position"]["y"],
            orientation=data["orientation"],
            sunk=data.get("sunk", False),
        )


@dataclass
class GameModel:
    """Transport-safe representation of a battleship game used between API, Service, DB, and Game layers."""

    player1: PlayerId
    player2: Optional[PlayerId]
    ships1: list[ShipModel]
    ships2: list[ShipModel]
    board1_cells: CellGrid
    board2_cells: CellGrid
    status: str
    turn: Optional[PlayerId]
    winner: Optional[PlayerId] = None
    is_vs_ai: bool = False
    player1_ready: bool = False
    player2_ready: bool = False
    created_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    # Optimistic locking: the version of the record this model was read from.
    version: int = 0


@dataclass
class UserModel:
    """Registered user. The password is only ever present as a hash."""

    id: UUID
    username: str
    password_hash: str
    created_at: Optional[datetime] = None


@dataclass
class GameQuery:
    """
    Participation / status predicate used to list games.

    Every field left as None is ignored. The repository translates the fields into its own query language,
    in-memory stores can simply call matches().
    """

    statuses: Optional[set[str]] = None
    player1: Optional[PlayerId] = None
    not_player1: Optional[PlayerId] = None
    participant: Optional[PlayerId] = None
    not_participant: Optional[PlayerId] = None
    player2_is_set: Optional[bool] = None
    # "player2 joined OR game completed"
    joined_or_completed: bool = False
    # If given, the game must also match at least one of these.
    any_of: list["GameQuery"] = field(default_factory=list)

    def matches(self, game: GameModel) -> bool:
        players = (game.player1, game.player2)
        checks = [
            self.statuses is None or game.status in self.statuses,
            self.player1 is None or game.player1 == self.player1,
            self.not_player1 is None or game.player1 != self.not_player1,
            self.participant is None or self.participant in players,
            self.not_participant is None or self.not_participant not in players,
            self.player2_is_set is None
            or (game.player2 is not None) == self.player2_is_set,
            not self.joined_or_completed
            or game.player2 is not None
            or game.status == Status.COMPLETED,
            not self.any_of or any(query.matches(game) for query in self.any_of),
        ]
        return all(checks)
