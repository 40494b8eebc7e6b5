"""Environment-driven settings for the review service.

Values are read from the process environment, optionally populated from a
``.env`` file. The defaults reproduce the stock deployment: an SQLite mirror
in ``./reviews.db`` and a listener on port 8080.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

PERSISTENCE_DATABASE = "database"
PERSISTENCE_MEMORY = "memory"
_PERSISTENCE_MODES = (PERSISTENCE_DATABASE, PERSISTENCE_MEMORY)

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./reviews.db"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Runtime configuration of one service instance."""

    persistence: str = PERSISTENCE_DATABASE
    database_url: str = DEFAULT_DATABASE_URL
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    root_path: str = ""
    db_echo: bool = False

    def __post_init__(self) -> None:
        if self.persistence not in _PERSISTENCE_MODES:
            raise ValueError(
                f"REVIEWS_PERSISTENCE must be one of {', '.join(_PERSISTENCE_MODES)}, "
                f"got {self.persistence!r}"
            )

    @property
    def persistence_enabled(self) -> bool:
        return self.persistence == PERSISTENCE_DATABASE

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (``os.environ`` after ``.env`` loading by default)."""
        if environ is None:
            load_dotenv()
            environ = os.environ

        return cls(
            persistence=environ.get("REVIEWS_PERSISTENCE", PERSISTENCE_DATABASE)
            .strip()
            .lower(),
            database_url=environ.get("DATABASE_URL", DEFAULT_DATABASE_URL),
            host=environ.get("HOST", DEFAULT_HOST),
            port=int(environ.get("PORT", DEFAULT_PORT)),
            root_path=environ.get("ROOT_PATH", ""),
            db_echo=environ.get("DB_ECHO", "false").strip().lower() in _TRUTHY,
        )
