"""
Settings read from the environment.

Only the outer layers (db, services) use these. The chess domain itself has nothing to configure.
"""

import logging
import os
from dataclasses import dataclass
from typing import Self

DEFAULT_DATABASE_URL = "sqlite:///./chess.db"
DEFAULT_LOG_LEVEL = "INFO"


def _read_env() -> tuple[str, bool, str]:
    """(database url, sql echo, log level) from the environment, or their defaults."""
    return (
        os.getenv("CHESS_DATABASE_URL", DEFAULT_DATABASE_URL),
        os.getenv("CHESS_SQL_ECHO", "false").lower() == "true",
        os.getenv("CHESS_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )


DATABASE_URL, SQL_ECHO, LOG_LEVEL = _read_env()

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class Settings:
    database_url: str = DATABASE_URL
    sql_echo: bool = SQL_ECHO
    log_level: str = LOG_LEVEL

    @classmethod
    def from_env(cls) -> Self:
        """Re-read the environment (the module constants are only read once, at import)."""
        database_url, sql_echo, log_level = _read_env()
        return cls(database_url=database_url, sql_echo=sql_echo, log_level=log_level)


def configure_logging(settings: Settings | None = None) -> None:
    """Root logger setup for whatever process hosts the service."""
    settings = settings or Settings()
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {settings.log_level!r}")
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # SQLAlchemy is very chatty on INFO, only show it when explicitly asked for.
    if not settings.sql_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
