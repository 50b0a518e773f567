"""
Application settings, read from environment variables.

* CHESS_DATABASE_URL: SQLAlchemy URL of the games database
* CHESS_SQL_ECHO: log all SQL statements ("1", "true", "yes")
* CHESS_LOG_LEVEL: level name passed to the logging module
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional, Self

DEFAULT_DATABASE_URL = "sqlite:///./chess.db"
DEFAULT_LOG_LEVEL = "INFO"
TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    sql_echo: bool = False
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Self:
        env = os.environ if environ is None else environ
        return cls(
            database_url=env.get("CHESS_DATABASE_URL", DEFAULT_DATABASE_URL),
            sql_echo=env.get("CHESS_SQL_ECHO", "").strip().lower() in TRUTHY,
            log_level=env.get("CHESS_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Basic logging setup for processes embedding the engine."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
