"""Session / user directory: registration, login, and resolving the caller's identity."""

import logging
from typing import Optional
from uuid import UUID

import bcrypt

from src.api.models import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from src.core.exceptions import (
    InvalidCredentialsError,
    UnauthorizedError,
    UserExistsError,
    UserNotFoundError,
)
from src.core.models import UserModel
from src.db.repository import UserRepository

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


class UserService:
    """
    Identity store used to find out who is making a request.

    NOTE: the token handed out is simply the user's id. It is not signed, anyone who knows an id can act as that user.
    """

    def __init__(self, repository: UserRepository) -> None:
        self.repo = repository

    def register(self, request: RegisterRequest) -> AuthResponse:
        if self.repo.get_user_by_username(request.username) is not None:
            raise UserExistsError("User already exists")

        user = self.repo.create_user(request.username, hash_password(request.password))
        logger.info("Registered user %s (%s)", user.username, user.id)
        return self._auth_response("User registered successfully", user)

    def login(self, request: LoginRequest) -> AuthResponse:
        user = self.repo.get_user_by_username(request.username)
        if user is None or not verify_password(request.password, user.password_hash):
            raise InvalidCredentialsError("User not found or password incorrect")
        return self._auth_response("Login successful", user)

    def get_user(self, user_id: str) -> UserResponse:
        user = self._lookup(user_id)
        if user is None:
            raise UserNotFoundError("User not found")
        return UserResponse(id=user.id, username=user.username)

    def resolve_caller(self, token: Optional[str]) -> str:
        """Turn the token from the request header into the id of an existing user."""
        if not token:
            raise UnauthorizedError("No token detected, authorization denied")
        user = self._lookup(token)
        if user is None:
            raise UnauthorizedError("Invalid token")
        return str(user.id)

    def usernames(self, user_ids: set[str]) -> dict[str, str]:
        """Display names for the given ids. Unknown ids are left out."""
        names: dict[str, str] = {}
        for user_id in user_ids:
            user = self._lookup(user_id)
            if user is not None:
                names[user_id] = user.username
        return names

    def _lookup(self, user_id: str) -> Optional[UserModel]:
        try:
            parsed = UUID(user_id)
        except ValueError:
            return None
        return self.repo.get_user(parsed)

    def _auth_response(self, msg: str, user: UserModel) -> AuthResponse:
        return AuthResponse(
            msg=msg,
            token=str(user.id),
            user=UserResponse(id=user.id, username=user.username),
        )
