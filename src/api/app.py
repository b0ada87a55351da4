"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.errors import register_error_handlers
from src.api.routes import games_router, users_router
from src.core.config import Settings
from src.db.database import Database

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None, database: Optional[Database] = None
) -> FastAPI:
    """
    Build the FastAPI app.
    ----

    The database handle is created here (or injected, for tests) and initialized at startup.
    Failing to reach the database at startup is fatal: the exception propagates and the server does not start.
    """
    settings = settings or Settings.from_env()
    database = database or Database(settings.database_url, echo=settings.echo_sql)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            database.init()
        except Exception:
            logger.critical("Could not connect to the database", exc_info=True)
            raise
        app.state.database = database
        yield
        database.dispose()

    app = FastAPI(title="Battleship API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    @app.get("/", include_in_schema=False)
    def root() -> dict[str, str]:
        return {"msg": "API Running"}

    app.include_router(users_router, prefix="/api")
    app.include_router(games_router, prefix="/api")
    return app
