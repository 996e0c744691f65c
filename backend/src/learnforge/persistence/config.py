"""Database configuration and directory factory."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from learnforge.persistence.users import SQLUserDirectory


@dataclass
class DatabaseConfig:
    """Database connection configuration.

    Supports sqlite:/// and postgresql:// URL schemes.
    """

    url: str

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> DatabaseConfig:
        """Create config from environment variables.

        Resolution order:
        1. DATABASE_URL env var (standard)
        2. LEARNFORGE_DB_PATH env var (converted to sqlite:/// URL)
        3. Default: sqlite:///{base_path}/data/learnforge.db
        """
        url = os.environ.get("DATABASE_URL")
        if url:
            return cls(url=url)

        db_path = os.environ.get("LEARNFORGE_DB_PATH")
        if db_path:
            return cls(url=f"sqlite:///{db_path}")

        if base_path:
            return cls(url=f"sqlite:///{base_path / 'data' / 'learnforge.db'}")

        return cls(url="sqlite:///learnforge.db")

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def is_postgresql(self) -> bool:
        return self.url.startswith("postgresql")

    @property
    def sqlite_path(self) -> Path | None:
        """Filesystem path of a file-backed SQLite database, else None."""
        if not self.is_sqlite:
            return None
        path = self.url.replace("sqlite:///", "", 1)
        if not path or path == ":memory:":
            return None
        return Path(path)

    @property
    def sqlalchemy_url(self) -> str:
        """URL suitable for SQLAlchemy engine creation.

        Ensures postgresql:// URLs use the psycopg (v3) driver since
        the project depends on psycopg[binary], not psycopg2.
        """
        if self.url.startswith("postgresql://"):
            return self.url.replace("postgresql://", "postgresql+psycopg://", 1)
        return self.url


def create_directory(config: DatabaseConfig) -> SQLUserDirectory:
    """Create a user directory for the configured database.

    Creates the parent directory of a file-backed SQLite database so a fresh
    checkout can start without manual setup.

    Raises:
        ValueError: For unsupported URL schemes.
    """
    if not (config.is_sqlite or config.is_postgresql):
        raise ValueError(f"Unsupported database URL scheme: {config.url}")

    sqlite_path = config.sqlite_path
    if sqlite_path is not None:
        sqlite_path.parent.mkdir(parents=True, exist_ok=True)

    from learnforge.persistence.users import SQLUserDirectory

    return SQLUserDirectory(config.sqlalchemy_url)
