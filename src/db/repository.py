"""Protocol repositories (implemented with SQLAlchemy in sql_repository.py, mocked with dictionaries in the tests)"""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel, GameQuery, UserModel


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """
        Add new info to existing record.

        Raises ConcurrentUpdateError if the record changed since `game` was read (compares `game.version`).
        """
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        ...

    def list_games(self, query: GameQuery) -> list[tuple[UUID, GameModel]]:
        """All games matching the query, most recently created first."""
        ...


class UserRepository(Protocol):
    """Minimal identity store"""

    def get_user(self, user_id: UUID) -> UserModel | None:
        ...

    def get_user_by_username(self, username: str) -> UserModel | None:
        ...

    def create_user(self, username: str, password_hash: str) -> UserModel:
        """Store a new user. Raises UserExistsError if the username is taken."""
        ...
