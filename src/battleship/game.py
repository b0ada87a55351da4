"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of battleship -->
passes this information to the service layer, which can then pass it onwards to the API layer.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Self

from src.battleship.board import AttackOutcome, Board
from src.battleship.coordinate import Coordinate
from src.core.exceptions import (
    AlreadyDecidedError,
    GameFullError,
    GameNotActiveError,
    GameNotOpenError,
    GameStateError,
    InvalidTargetError,
    NoOpponentError,
    NotAParticipantError,
    NotYourTurnError,
    SelfJoinError,
)
from src.core.models import GameModel
from src.core.shared_types import Status

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AttackClaim:
    """Outcome as reported by the attacking client. Only used to detect disagreement with the server."""

    hit: Optional[bool] = None
    sunk_ship_name: Optional[str] = None
    all_ships_sunk: Optional[bool] = None


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    player1: str
    player2: Optional[str]
    board1: Board
    board2: Board
    status: Status
    turn: Optional[str]
    winner: Optional[str] = None
    is_vs_ai: bool = False
    player1_ready: bool = False
    player2_ready: bool = False
    created_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    version: int = 0

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        # Validation
        if model.status not in Status.__members__.values():
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(status.value for status in Status)}"
            )

        return cls(
            player1=model.player1,
            player2=model.player2,
            board1=Board.place_board(model.ships1, model.board1_cells),
            board2=Board.place_board(model.ships2, model.board2_cells),
            status=Status(model.status),
            turn=model.turn,
            winner=model.winner,
            is_vs_ai=model.is_vs_ai,
            player1_ready=model.player1_ready,
            player2_ready=model.player2_ready,
            created_at=model.created_at,
            started_at=model.started_at,
            ended_at=model.ended_at,
            version=model.version,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""

        return GameModel(
            player1=self.player1,
            player2=self.player2,
            ships1=self.board1.ship_models(),
            ships2=self.board2.ship_models(),
            board1_cells=self.board1.to_grid(),
            board2_cells=self.board2.to_grid(),
            status=self.status.value,
            turn=self.turn,
            winner=self.winner,
            is_vs_ai=self.is_vs_ai,
            player1_ready=self.player1_ready,
            player2_ready=self.player2_ready,
            created_at=self.created_at,
            started_at=self.started_at,
            ended_at=self.ended_at,
            version=self.version,
        )

    @classmethod
    def new_game(cls, player: str, board: Board, is_vs_ai: bool = False) -> Self:
        """To open a new game. The creator's fleet is placed right away and the creator gets the first turn."""
        return cls(
            player1=player,
            player2=None,
            board1=board,
            board2=Board.empty(),
            status=Status.OPEN,
            turn=player,
            is_vs_ai=is_vs_ai,
            player1_ready=True,
            created_at=utc_now(),
        )

    @property
    def players(self) -> list[str]:
        return [p for p in (self.player1, self.player2) if p is not None]

    def register_player(self, player: str, board: Board) -> None:
        """Registering the 2nd player (and their fleet) to an open game. Turn stays with the creator."""
        if player == self.player1:
            raise SelfJoinError("You cannot join your own game")
        if self.player2 is not None:
            raise GameFullError("Game is full or already started")
        if self.status != Status.OPEN:
            raise GameNotOpenError(
                f"This game is not open to join. status: {self.status}"
            )

        self.player2 = player
        self.board2 = board
        self.player2_ready = True
        self.started_at = utc_now()
        self._change_status(Status.ACTIVE)

    def attack(
        self,
        attacker: str,
        coordinate: Coordinate,
        target: Optional[str] = None,
        claim: Optional[AttackClaim] = None,
    ) -> AttackOutcome:
        """
        Attempt an attack
        -----

        1. game must be in progress and undecided
        2. attacker must be a participant, and it must be their turn
        3. target (if given) must be the attacker's opponent
        4. the opponent's board resolves the attack (raises for bad/repeated coordinates)
        5. sinking the last ship ends the game, otherwise the turn passes on
        """
        self._assert_in_progress()
        self._assert_participant(attacker)
        self._assert_your_turn(attacker)

        opponent = self._opponent_of(attacker)
        if opponent is None or (target is not None and target != opponent):
            raise InvalidTargetError(f"Invalid target player: {target!r}")

        outcome = self._board_of(opponent).apply_attack(coordinate)
        if claim is not None:
            self._compare_claim(attacker, outcome, claim)

        if outcome.all_ships_sunk:
            self._finish(winner=attacker)
        else:
            self.turn = opponent
        return outcome

    def surrender(self, player: str) -> None:
        """The surrendering participant hands the win to their opponent."""
        self._assert_in_progress()
        self._assert_participant(player)

        opponent = self._opponent_of(player)
        if opponent is None:
            raise NoOpponentError("Opponent does not exist, cannot surrender")
        self._finish(winner=opponent)

    # -- PRIVATE HELPERS ---
    def _assert_in_progress(self) -> None:
        if self.status != Status.ACTIVE:
            raise GameNotActiveError(
                f"Game not started or already ended. status: {self.status}"
            )
        if self.winner is not None:
            raise AlreadyDecidedError("Game already has a winner")

    def _assert_participant(self, player: str) -> None:
        if player not in self.players:
            raise NotAParticipantError("You are not a player in this game")

    def _assert_your_turn(self, player: str) -> None:
        """You must wait for your turn before attacking."""
        if self.turn != player:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for player {self.turn} to attack first."
            )

    def _opponent_of(self, player: str) -> Optional[str]:
        if player == self.player1:
            return self.player2
        return self.player1

    def _board_of(self, player: str) -> Board:
        return self.board1 if player == self.player1 else self.board2

    def _finish(self, winner: str) -> None:
        self.winner = winner
        self.turn = None
        self.ended_at = utc_now()
        self._change_status(Status.COMPLETED)

    def _change_status(self, status: Status) -> None:
        self.status = status

    def _compare_claim(
        self, attacker: str, outcome: AttackOutcome, claim: AttackClaim
    ) -> None:
        """Client claims are advisory. Disagreements are only logged."""
        disagreements = []
        if claim.hit is not None and claim.hit != outcome.hit:
            disagreements.append(f"hit={claim.hit} (actual {outcome.hit})")
        if claim.sunk_ship_name and claim.sunk_ship_name != outcome.sunk_ship:
            disagreements.append(
                f"sunk={claim.sunk_ship_name!r} (actual {outcome.sunk_ship!r})"
            )
        if (
            claim.all_ships_sunk is not None
            and claim.all_ships_sunk != outcome.all_ships_sunk
        ):
            disagreements.append(
                f"all_sunk={claim.all_ships_sunk} (actual {outcome.all_ships_sunk})"
            )
        if disagreements:
            logger.warning(
                "Ignoring attack claim by %s at (%d, %d): %s",
                attacker,
                outcome.coordinate.x,
                outcome.coordinate.y,
                ", ".join(disagreements),
            )
