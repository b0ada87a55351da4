"""Implementation of (Game/User)Repository using SQLAlchemy"""

import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import ColumnElement, and_, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from src.core.exceptions import ConcurrentUpdateError, UserExistsError
from src.core.models import GameModel, GameQuery, ShipModel, UserModel
from src.core.shared_types import Status
from src.db.schema import DBGame, DBUser

logger = logging.getLogger(__name__)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes. Everything is stored in UTC, so re-attach the timezone."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(id=new_id)
        self._copy_fields(game, game_db)
        if game.created_at is not None:
            game_db.created_at = game.created_at
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record (only if nobody else did so after `game` was read)."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        if game_db.version != game.version:
            raise ConcurrentUpdateError(
                f"Game {game_id} was modified by another request. Reload and try again."
            )
        self._copy_fields(game, game_db)
        try:
            self.db.commit()
        except StaleDataError as e:
            self.db.rollback()
            logger.info("Lost update race on game %s", game_id)
            raise ConcurrentUpdateError(
                f"Game {game_id} was modified by another request. Reload and try again."
            ) from e
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def list_games(self, query: GameQuery) -> list[tuple[UUID, GameModel]]:
        """All games matching the query, most recently created first."""
        statement = (
            select(DBGame)
            .where(self._where(query))
            .order_by(DBGame.created_at.desc())
        )
        return [
            (game_db.id, self._to_model(game_db))
            for game_db in self.db.scalars(statement)
        ]

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _where(self, query: GameQuery) -> ColumnElement[bool]:
        """Translate a GameQuery into a SQL boolean expression."""
        clauses: list[ColumnElement[bool]] = []
        if query.statuses is not None:
            statuses = sorted(str(status) for status in query.statuses)
            clauses.append(DBGame.status.in_(statuses))
        if query.player1 is not None:
            clauses.append(DBGame.player1 == query.player1)
        if query.not_player1 is not None:
            clauses.append(DBGame.player1 != query.not_player1)
        if query.participant is not None:
            clauses.append(
                or_(
                    DBGame.player1 == query.participant,
                    DBGame.player2 == query.participant,
                )
            )
        if query.not_participant is not None:
            # NULL never compares unequal in SQL, so an empty seat has to be allowed explicitly
            clauses.append(DBGame.player1 != query.not_participant)
            clauses.append(
                or_(
                    DBGame.player2.is_(None),
                    DBGame.player2 != query.not_participant,
                )
            )
        if query.player2_is_set is not None:
            clauses.append(
                DBGame.player2.is_not(None)
                if query.player2_is_set
                else DBGame.player2.is_(None)
            )
        if query.joined_or_completed:
            clauses.append(
                or_(
                    DBGame.player2.is_not(None),
                    DBGame.status == Status.COMPLETED.value,
                )
            )
        if query.any_of:
            clauses.append(or_(*(self._where(sub) for sub in query.any_of)))
        return and_(True, *clauses)

    def _copy_fields(self, game: GameModel, game_db: DBGame) -> None:
        game_db.player1 = game.player1
        game_db.player2 = game.player2
        game_db.is_vs_ai = game.is_vs_ai
        game_db.ships1 = [ship.to_dict() for ship in game.ships1]
        game_db.ships2 = [ship.to_dict() for ship in game.ships2]
        game_db.board1_cells = game.board1_cells
        game_db.board2_cells = game.board2_cells
        game_db.status = game.status
        game_db.turn = game.turn
        game_db.winner = game.winner
        game_db.player1_ready = game.player1_ready
        game_db.player2_ready = game.player2_ready
        game_db.started_at = game.started_at
        game_db.ended_at = game.ended_at

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            player1=game_db.player1,
            player2=game_db.player2,
            ships1=[ShipModel.from_dict(ship) for ship in game_db.ships1],
            ships2=[ShipModel.from_dict(ship) for ship in game_db.ships2],
            board1_cells=game_db.board1_cells,
            board2_cells=game_db.board2_cells,
            status=game_db.status,
            turn=game_db.turn,
            winner=game_db.winner,
            is_vs_ai=game_db.is_vs_ai,
            player1_ready=game_db.player1_ready,
            player2_ready=game_db.player2_ready,
            created_at=_as_utc(game_db.created_at),
            started_at=_as_utc(game_db.started_at),
            ended_at=_as_utc(game_db.ended_at),
            version=game_db.version,
        )


class SQLUserRepository:
    """Users table, implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_user(self, user_id: UUID) -> UserModel | None:
        user_db = self.db.scalar(select(DBUser).where(DBUser.id == user_id))
        return self._to_model(user_db) if user_db else None

    def get_user_by_username(self, username: str) -> UserModel | None:
        user_db = self.db.scalar(select(DBUser).where(DBUser.username == username))
        return self._to_model(user_db) if user_db else None

    def create_user(self, username: str, password_hash: str) -> UserModel:
        user_db = DBUser(id=uuid4(), username=username, password_hash=password_hash)
        self.db.add(user_db)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise UserExistsError("User already exists") from e
        self.db.refresh(user_db)
        return self._to_model(user_db)

    def _to_model(self, user_db: DBUser) -> UserModel:
        return UserModel(
            id=user_db.id,
            username=user_db.username,
            password_hash=user_db.password_hash,
            created_at=_as_utc(user_db.created_at),
        )
