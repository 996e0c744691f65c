"""FastAPI application."""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from learnforge.api.errors import register_exception_handlers
from learnforge.api.roles import create_role_router
from learnforge.auth import AuthFlowService, JWTService, PasswordService, Role
from learnforge.auth.endpoints import create_auth_router
from learnforge.auth.google import GoogleOAuthClient
from learnforge.config import Settings
from learnforge.persistence import SQLUserDirectory, create_directory

logger = logging.getLogger(__name__)


def _base_path() -> Path:
    """Project root, whether started from the repo root or from backend/."""
    cwd = Path.cwd()
    if cwd.name == "backend":
        return cwd.parent
    return cwd


def _cors_origin(settings: Settings | None) -> str:
    if settings:
        return settings.client_url
    return os.environ.get("CLIENT_URL", "http://localhost:5173").rstrip("/")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Explicit settings; read from the environment at startup
            when omitted

    Returns:
        The FastAPI app. Services are created in the lifespan handler.
    """
    # Initialized on startup
    state: dict = {
        "settings": settings,
        "directory": None,
        "service": None,
        "google": None,
    }

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize on startup, cleanup on shutdown."""
        active = state["settings"] or Settings.from_env(_base_path())
        state["settings"] = active
        logging.getLogger().setLevel(active.log_level)

        directory: SQLUserDirectory = create_directory(active.database)
        directory.ensure_schema()

        jwt_service = JWTService(active.secret_key)
        app.state.jwt_service = jwt_service
        state["directory"] = directory
        state["service"] = AuthFlowService(
            directory=directory,
            jwt_service=jwt_service,
            password_service=PasswordService(rounds=active.bcrypt_rounds),
            client_url=active.client_url,
        )
        if active.google:
            state["google"] = GoogleOAuthClient(active.google)
        else:
            logger.info("Google sign-in disabled (GOOGLE_CLIENT_ID/SECRET/CALLBACK_URL not set)")

        logger.info("LearnForge API started (environment=%s)", active.environment)

        yield

        # Cleanup
        directory.dispose()

    app = FastAPI(title="LearnForge API", lifespan=lifespan)

    # CORS for the frontend; cookies need credentials
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[_cors_origin(settings)],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(
        create_auth_router(
            get_service=lambda: state["service"],
            get_settings=lambda: state["settings"],
            get_google_client=lambda: state["google"],
        )
    )
    for role in Role:
        app.include_router(create_role_router(role))

    @app.get("/api/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
