"""Exception handlers mapping domain errors to JSON responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from learnforge.errors import InfrastructureError, LearnForgeError

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Server error"


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers for LearnForge errors and malformed request bodies."""

    @app.exception_handler(InfrastructureError)
    async def handle_infrastructure_error(request: Request, exc: InfrastructureError):
        logger.error(
            "%s %s failed: %s",
            request.method,
            request.url.path,
            exc.message,
            exc_info=exc,
        )
        return _error_response(exc.status_code, GENERIC_SERVER_ERROR)

    @app.exception_handler(LearnForgeError)
    async def handle_learnforge_error(request: Request, exc: LearnForgeError):
        logger.warning(
            "%s %s -> %s: %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        fields = sorted(
            {str(err["loc"][-1]) for err in exc.errors() if err.get("loc")}
        )
        message = "Invalid request body"
        if fields:
            message = f"Invalid request fields: {', '.join(fields)}"
        return _error_response(400, message)
