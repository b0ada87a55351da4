"""HTTP routes. Each route only translates between HTTP and the service layer: all rules live in the services / domain."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, status

from src.api.dependencies import CurrentPlayer, Games, OptionalPlayer, Users
from src.api.models import (
    AttackPayload,
    AttackRequest,
    AuthResponse,
    CreateGamePayload,
    CreateGameRequest,
    GameResponse,
    GetGameRequest,
    JoinGamePayload,
    JoinGameRequest,
    ListGamesRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    SurrenderRequest,
    UserResponse,
)
from src.core.exceptions import GameNotFoundError, InvalidRequestError

logger = logging.getLogger(__name__)

games_router = APIRouter(prefix="/games", tags=["games"])
users_router = APIRouter(prefix="/users", tags=["users"])


def _parse_game_id(game_id: str, not_found: bool = False) -> UUID:
    """Looking up an invalid id is a 404, acting on one is a bad request."""
    try:
        return UUID(game_id)
    except ValueError:
        if not_found:
            raise GameNotFoundError("Game not found (invalid ID)")
        raise InvalidRequestError("Invalid game ID")


# --- GAMES ---
@games_router.post("", status_code=status.HTTP_201_CREATED)
def create_game(
    payload: CreateGamePayload, player: CurrentPlayer, service: Games
) -> GameResponse:
    request = CreateGameRequest(
        player_id=player,
        ships_layout=payload.ships_layout,
        is_vs_ai=payload.is_vs_ai,
    )
    return service.create_new_game(request)


@games_router.get("")
def list_games(
    player: OptionalPlayer,
    service: Games,
    type: Optional[str] = None,
    status_filter: Optional[str] = None,
) -> list[GameResponse]:
    request = ListGamesRequest(player_id=player, type=type, status_filter=status_filter)
    return service.list_games(request)


@games_router.get("/{game_id}")
def get_game(game_id: str, service: Games) -> GameResponse:
    request = GetGameRequest(game_id=_parse_game_id(game_id, not_found=True))
    return service.get_game_state(request)


@games_router.put("/{game_id}/join")
def join_game(
    game_id: str, payload: JoinGamePayload, player: CurrentPlayer, service: Games
) -> GameResponse:
    request = JoinGameRequest(
        game_id=_parse_game_id(game_id),
        player_id=player,
        ships_layout=payload.ships_layout,
    )
    return service.join_game(request)


@games_router.post("/{game_id}/attack")
def attack(
    game_id: str, payload: AttackPayload, player: CurrentPlayer, service: Games
) -> GameResponse:
    request = AttackRequest(
        game_id=_parse_game_id(game_id),
        player_id=player,
        **payload.model_dump(),
    )
    return service.attack(request)


@games_router.put("/{game_id}/surrender")
def surrender(game_id: str, player: CurrentPlayer, service: Games) -> GameResponse:
    request = SurrenderRequest(game_id=_parse_game_id(game_id), player_id=player)
    return service.surrender(request)


# --- USERS ---
@users_router.post("/register", status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, users: Users) -> AuthResponse:
    return users.register(request)


@users_router.post("/login")
def login(request: LoginRequest, users: Users) -> AuthResponse:
    return users.login(request)


@users_router.post("/logout")
def logout(player: CurrentPlayer) -> MessageResponse:
    logger.info("User %s logged out", player)
    return MessageResponse(msg="Logout successful. Please clear the token on the client.")


@users_router.get("/me")
def me(player: CurrentPlayer, users: Users) -> UserResponse:
    return users.get_user(player)
