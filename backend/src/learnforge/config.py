"""Application settings loaded from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from learnforge.auth.google import GoogleOAuthConfig
from learnforge.persistence.config import DatabaseConfig

logger = logging.getLogger(__name__)

DEV_SECRET_KEY = "dev-secret-key-change-in-production"


def _get_int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass
class Settings:
    """Runtime configuration.

    Attributes:
        environment: Deployment environment; "production" enables secure cookies
        secret_key: JWT signing secret
        database: Where the user directory lives
        client_url: Frontend base URL, used for redirects and CORS
        google: Google OAuth client, or None when sign-in with Google is disabled
        bcrypt_rounds: bcrypt work factor for new password hashes
        log_level: Root log level name
    """

    environment: str = "development"
    secret_key: str = DEV_SECRET_KEY
    database: DatabaseConfig = field(default_factory=lambda: DatabaseConfig("sqlite:///learnforge.db"))
    client_url: str = "http://localhost:5173"
    google: GoogleOAuthConfig | None = None
    bcrypt_rounds: int = 12
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> Settings:
        """Create settings from environment variables.

        LEARNFORGE_ENV wins over NODE_ENV so the service can share an
        environment file with the frontend build.
        """
        environment = (
            os.environ.get("LEARNFORGE_ENV") or os.environ.get("NODE_ENV") or "development"
        ).strip().lower()

        secret_key = os.environ.get("JWT_SECRET")
        if not secret_key:
            if environment == "production":
                raise RuntimeError("JWT_SECRET environment variable is not configured")
            logger.warning("JWT_SECRET not set, using the development secret")
            secret_key = DEV_SECRET_KEY

        google = None
        client_id = os.environ.get("GOOGLE_CLIENT_ID")
        client_secret = os.environ.get("GOOGLE_CLIENT_SECRET")
        callback_url = os.environ.get("GOOGLE_CALLBACK_URL")
        if client_id and client_secret and callback_url:
            google = GoogleOAuthConfig(
                client_id=client_id,
                client_secret=client_secret,
                redirect_uri=callback_url,
            )

        return cls(
            environment=environment,
            secret_key=secret_key,
            database=DatabaseConfig.from_env(base_path),
            client_url=os.environ.get("CLIENT_URL", "http://localhost:5173").rstrip("/"),
            google=google,
            bcrypt_rounds=_get_int_env("LEARNFORGE_BCRYPT_ROUNDS", 12),
            log_level=os.environ.get("LEARNFORGE_LOG_LEVEL", "INFO").upper(),
        )
