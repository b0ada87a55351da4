"""
Custom exceptions shared by all layers.

Hierarchy:
- GameError (base for every error the service layer lets through to the API)
  - InvalidRequestError     malformed request data
  - GameStateError          game cannot perform the operation in its current state
  - AuthError               identity could not be established / is not allowed
  - RepositoryError         persistence layer problems

Every class carries the HTTP status code the API responds with. The API layer is the only place that reads it.
"""


class GameError(Exception):
    """Base exception for all errors raised by this application."""

    status_code: int = 500


# --- VALIDATION ---
class InvalidRequestError(GameError):
    status_code = 400


class InvalidLayoutError(InvalidRequestError):
    """Supplied ship layout / cell grid cannot be turned into a board."""


class OutOfRangeError(InvalidRequestError):
    """Coordinates outside the 10x10 board."""


# --- GAME STATE CONFLICTS ---
class GameStateError(GameError):
    status_code = 400


class SelfJoinError(GameStateError):
    pass


class GameFullError(GameStateError):
    pass


class GameNotOpenError(GameStateError):
    pass


class GameNotActiveError(GameStateError):
    pass


class AlreadyDecidedError(GameStateError):
    pass


class NotYourTurnError(GameStateError):
    pass


class InvalidTargetError(GameStateError):
    pass


class AlreadyAttackedError(GameStateError):
    pass


class NoOpponentError(GameStateError):
    pass


# --- IDENTITY / AUTHORIZATION ---
class AuthError(GameError):
    status_code = 401


class UnauthorizedError(AuthError):
    """No (valid) identity supplied."""


class NotAParticipantError(AuthError):
    status_code = 403


class UserExistsError(AuthError):
    status_code = 400


class InvalidCredentialsError(AuthError):
    status_code = 400


# --- PERSISTENCE ---
class RepositoryError(GameError):
    status_code = 500


class GameNotFoundError(RepositoryError):
    status_code = 404


class UserNotFoundError(RepositoryError):
    status_code = 404


class ConcurrentUpdateError(RepositoryError):
    """Record changed since it was read. Caller should re-fetch and try again."""

    status_code = 409
