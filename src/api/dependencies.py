"""FastAPI dependencies: database session per request, services, and the caller's identity."""

from typing import Annotated, Generator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from src.core.exceptions import UnauthorizedError
from src.db.database import Database
from src.db.sql_repository import SQLGameRepository, SQLUserRepository
from src.services.battleship_service import BattleshipService
from src.services.user_service import UserService


def get_database(request: Request) -> Database:
    """The storage handle created at startup (see create_app in src/api/app.py)."""
    return request.app.state.database


def get_db(
    database: Annotated[Database, Depends(get_database)],
) -> Generator[Session, None, None]:
    yield from database.session()


def get_user_service(db: Annotated[Session, Depends(get_db)]) -> UserService:
    return UserService(SQLUserRepository(db))


def get_battleship_service(
    db: Annotated[Session, Depends(get_db)],
    users: Annotated[UserService, Depends(get_user_service)],
) -> BattleshipService:
    return BattleshipService(SQLGameRepository(db), users=users)


def get_current_player(
    users: Annotated[UserService, Depends(get_user_service)],
    x_auth_token: Annotated[Optional[str], Header()] = None,
) -> str:
    """Required authentication: 401 if the header is missing or does not belong to a user."""
    return users.resolve_caller(x_auth_token)


def get_optional_player(
    users: Annotated[UserService, Depends(get_user_service)],
    x_auth_token: Annotated[Optional[str], Header()] = None,
) -> Optional[str]:
    """Optional authentication: anonymous callers (or unknown tokens) get None."""
    try:
        return users.resolve_caller(x_auth_token)
    except UnauthorizedError:
        return None


CurrentPlayer = Annotated[str, Depends(get_current_player)]
OptionalPlayer = Annotated[Optional[str], Depends(get_optional_player)]
Games = Annotated[BattleshipService, Depends(get_battleship_service)]
Users = Annotated[UserService, Depends(get_user_service)]
