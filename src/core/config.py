"""Runtime configuration, read from environment variables."""

import os
from dataclasses import dataclass, field
from typing import Self


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: list[str]) -> list[str]:
    value = os.environ.get(name)
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    database_url: str = "sqlite:///./battleship.db"
    echo_sql: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    port: int = 5001

    @classmethod
    def from_env(cls) -> Self:
        return cls(
            database_url=os.environ.get("BATTLESHIP_DATABASE_URL", cls.database_url),
            echo_sql=_env_bool("BATTLESHIP_ECHO_SQL", cls.echo_sql),
            log_level=os.environ.get("BATTLESHIP_LOG_LEVEL", cls.log_level).upper(),
            cors_origins=_env_list("BATTLESHIP_CORS_ORIGINS", ["*"]),
            port=int(os.environ.get("PORT", cls.port)),
        )
