"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBUser(Base):
    __tablename__ = "users"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    password_hash: Mapped[str]
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    player1: Mapped[str] = mapped_column(String(64), index=True)
    player2: Mapped[Optional[str]] = mapped_column(String(64), index=True)
    is_vs_ai: Mapped[bool] = mapped_column(default=False)
    ships1: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    ships2: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    board1_cells: Mapped[list[list[str]]] = mapped_column(JSON)
    board2_cells: Mapped[list[list[str]]] = mapped_column(JSON)
    status: Mapped[str] = mapped_column(index=True)
    turn: Mapped[Optional[str]] = mapped_column(String(64))
    winner: Mapped[Optional[str]] = mapped_column(String(64))
    player1_ready: Mapped[bool] = mapped_column(default=False)
    player2_ready: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, index=True
    )
    started_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    ended_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    # Bumped by SQLAlchemy on every UPDATE; a stale UPDATE matches no row and raises StaleDataError.
    version: Mapped[int] = mapped_column(nullable=False)

    __mapper_args__ = {"version_id_col": version}
