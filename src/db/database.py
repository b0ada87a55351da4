"""Database engine / session handling. Nothing is created at import time: the app builds a Database at startup and disposes of it at shutdown."""

import logging
from typing import Generator

from sqlalchemy import Engine, StaticPool, create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from src.db.schema import Base

logger = logging.getLogger(__name__)


class Database:
    """Owns the engine and session factory for one process."""

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        self.engine = create_db_engine(url, echo=echo)
        self.session_factory = sessionmaker(bind=self.engine, autoflush=False)

    def init(self) -> None:
        """Check the connection and ensure all tables are created. Raises if the database is unreachable."""
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database ready at %s", self.engine.url.render_as_string())

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database connections closed")

    def session(self) -> Generator[Session, None, None]:
        db = self.session_factory()
        try:
            yield db
        finally:
            db.close()


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """In-memory SQLite needs a single shared connection, otherwise every session sees an empty database."""
    if url == "sqlite://" or (url.startswith("sqlite") and ":memory:" in url):
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if url.startswith("sqlite"):
        return create_engine(url, echo=echo, connect_args={"check_same_thread": False})
    return create_engine(url, echo=echo, pool_pre_ping=True)
