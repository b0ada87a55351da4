"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from typing import Optional, Protocol
from uuid import UUID

from src.api.models import (
    AttackRequest,
    AttackResult,
    CreateGameRequest,
    GameResponse,
    GetGameRequest,
    JoinGameRequest,
    ListGamesRequest,
    PlayerInfo,
    ShipPayload,
    SurrenderRequest,
)
from src.battleship.board import AttackOutcome, Board
from src.battleship.coordinate import Coordinate
from src.battleship.game import AttackClaim, Game
from src.core.exceptions import GameNotFoundError
from src.core.models import GameModel, GameQuery
from src.core.shared_types import Status
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)

# Games visible to anyone, also when not logged in.
PUBLIC_STATUSES = {Status.ACTIVE.value, Status.COMPLETED.value}


class UsernameLookup(Protocol):
    """Anything that can turn player ids into display names (see UserService.usernames)."""

    def usernames(self, user_ids: set[str]) -> dict[str, str]: ...


def build_game_query(
    player_id: Optional[str], list_type: Optional[str], status_filter: Optional[str]
) -> GameQuery:
    """
    Translate the `type` / `status_filter` query parameters into a GameQuery.
    ----

    Anonymous callers only get to see games in progress or finished (optionally narrowed down with status_filter).
    Logged in callers can ask for one of the lobby views, or (without type) get their own games and all public ones.
    """
    if player_id is None:
        if status_filter in PUBLIC_STATUSES:
            return GameQuery(statuses={status_filter})
        return GameQuery(statuses=PUBLIC_STATUSES)

    match list_type:
        case "my_open":
            return GameQuery(
                statuses={Status.OPEN.value}, player1=player_id, player2_is_set=False
            )
        case "open_for_others":
            return GameQuery(
                statuses={Status.OPEN.value},
                not_player1=player_id,
                player2_is_set=False,
            )
        case "my_active":
            return GameQuery(statuses={Status.ACTIVE.value}, participant=player_id)
        case "my_completed":
            return GameQuery(statuses={Status.COMPLETED.value}, participant=player_id)
        case "other_games":
            return GameQuery(
                statuses=PUBLIC_STATUSES,
                not_participant=player_id,
                joined_or_completed=True,
            )
        case None:
            return GameQuery(
                any_of=[
                    GameQuery(participant=player_id),
                    GameQuery(statuses=PUBLIC_STATUSES),
                ]
            )
        case _:
            return GameQuery(participant=player_id)


class BattleshipService:
    """Orchestration of layers for battleship game."""

    def __init__(
        self,
        repository: GameRepository,
        users: Optional[UsernameLookup] = None,
    ) -> None:
        self.repo = repository
        self.users = users

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """First player requested to create a new game, and supplied their fleet."""

        # Use info in CreateGameRequest to create a new Game, and convert into GameModel
        board = Board.deploy_fleet(
            request.ships_layout.ship_models(), request.ships_layout.cell_grid()
        )
        new_game = Game.new_game(
            player=request.player_id, board=board, is_vs_ai=request.is_vs_ai
        )
        created_game_data = new_game.to_model()

        # Store the GameModel in the repository
        stored_game, game_id = self.repo.create_game(created_game_data)
        logger.info("Game %s created by %s", game_id, request.player_id)

        # Return a GameResponse
        return self._create_game_response(game_id, stored_game)

    def join_game(self, request: JoinGameRequest) -> GameResponse:
        """Second player requested to join a game."""

        # Retrieve persisted GameModel from repository
        stored_model = self._fetch_game(request.game_id)

        # Create a new Game instance from the retrieved GameModel
        game = Game.from_model(stored_model)

        # Register the requested player
        board = Board.deploy_fleet(
            request.ships_layout.ship_models(), request.ships_layout.cell_grid()
        )
        game.register_player(request.player_id, board)

        # Capture updated state in GameModel and store in repository
        with_player_registered = self._store(request.game_id, game)
        logger.info("Player %s joined game %s", request.player_id, request.game_id)

        # Return a GameResponse
        return self._create_game_response(request.game_id, with_player_registered)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game_model = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game_model)

    def list_games(self, request: ListGamesRequest) -> list[GameResponse]:
        """Show recorded games, most recent first, filtered on the caller's participation and the game status."""
        query = build_game_query(
            request.player_id,
            request.type,
            request.status_filter,
        )
        games = self.repo.list_games(query)
        names = self._usernames(
            {player for _, model in games for player in self._player_ids(model)}
        )
        return [
            self._create_game_response(game_id, model, names=names)
            for game_id, model in games
        ]

    def attack(self, request: AttackRequest) -> GameResponse:
        """Make an attack attempt. The outcome is computed from the defender's board."""

        # Retrieve persisted GameModel from repository
        stored_model = self._fetch_game(request.game_id)

        # Create a new Game instance from the retrieved GameModel
        game = Game.from_model(stored_model)

        # Attempt the attack
        claim = AttackClaim(
            hit=request.hit,
            sunk_ship_name=request.sunk_ship_name,
            all_ships_sunk=request.all_player_ships_sunk,
        )
        outcome = game.attack(
            attacker=request.player_id,
            coordinate=Coordinate(request.coordinates.x, request.coordinates.y),
            target=request.target_player_id,
            claim=claim,
        )

        # Capture updated state in GameModel and store in repository
        after_attack = self._store(request.game_id, game)
        logger.info(
            "Game %s: %s attacked (%d, %d): %s%s",
            request.game_id,
            request.player_id,
            outcome.coordinate.x,
            outcome.coordinate.y,
            "hit" if outcome.hit else "miss",
            f", sunk {outcome.sunk_ship}" if outcome.sunk_ship else "",
        )
        if game.status == Status.COMPLETED:
            logger.info("Game %s completed, winner %s", request.game_id, game.winner)

        # Return a GameResponse
        response = self._create_game_response(request.game_id, after_attack)
        response.last_attack = self._attack_result(outcome)
        return response

    def surrender(self, request: SurrenderRequest) -> GameResponse:
        """Player gives up: the opponent wins."""
        stored_model = self._fetch_game(request.game_id)
        game = Game.from_model(stored_model)
        game.surrender(request.player_id)
        after_surrender = self._store(request.game_id, game)
        logger.info(
            "Player %s surrendered game %s, winner %s",
            request.player_id,
            request.game_id,
            game.winner,
        )
        return self._create_game_response(request.game_id, after_surrender)

    # -- Internal helpers --
    def _create_game_response(
        self,
        game_id: UUID,
        model: GameModel,
        names: Optional[dict[str, str]] = None,
    ) -> GameResponse:
        """Convert info in GameModel to a GameResponse (for game with given ID), with usernames filled in."""
        if names is None:
            names = self._usernames(self._player_ids(model))

        def _player(player_id: Optional[str]) -> Optional[PlayerInfo]:
            if player_id is None:
                return None
            return PlayerInfo(id=player_id, username=names.get(player_id))

        return GameResponse(
            game_id=game_id,
            player1=PlayerInfo(id=model.player1, username=names.get(model.player1)),
            player2=_player(model.player2),
            is_vs_ai=model.is_vs_ai,
            ships1=[ShipPayload.from_model(ship) for ship in model.ships1],
            ships2=[ShipPayload.from_model(ship) for ship in model.ships2],
            board1_cells=model.board1_cells,
            board2_cells=model.board2_cells,
            status=model.status,
            turn=model.turn,
            winner=_player(model.winner),
            player1_ready=model.player1_ready,
            player2_ready=model.player2_ready,
            created_at=model.created_at,
            started_at=model.started_at,
            ended_at=model.ended_at,
        )

    def _attack_result(self, outcome: AttackOutcome) -> AttackResult:
        return AttackResult(
            x=outcome.coordinate.x,
            y=outcome.coordinate.y,
            hit=outcome.hit,
            sunk_ship=outcome.sunk_ship,
            all_ships_sunk=outcome.all_ships_sunk,
        )

    def _usernames(self, player_ids: set[str]) -> dict[str, str]:
        if self.users is None:
            return {}
        return self.users.usernames(player_ids)

    def _player_ids(self, model: GameModel) -> set[str]:
        return {p for p in (model.player1, model.player2, model.winner) if p}

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")
        return game_model

    def _store(self, game_id: UUID, game: Game) -> GameModel:
        """Persist the updated game. The repository rejects the update if someone else changed the game meanwhile."""
        stored = self.repo.update_game(game_id, game.to_model())
        if stored is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")
        return stored
