"""Authentication API endpoints."""

import logging
import secrets
from typing import Any, Callable

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from learnforge.auth.cookies import clear_session_cookies, set_session_cookies
from learnforge.auth.google import GoogleOAuthClient, OAuthExchangeError
from learnforge.auth.middleware import authenticate_any_token
from learnforge.auth.service import AuthFlowService
from learnforge.auth.types import Principal
from learnforge.config import Settings
from learnforge.errors import InfrastructureError, LearnForgeError

logger = logging.getLogger(__name__)

OAUTH_STATE_COOKIE = "oauth_state"
OAUTH_STATE_TTL = 10 * 60  # 10 minutes


class RegisterRequest(BaseModel):
    """Request body for user registration."""

    name: str | None = None
    email: str | None = None
    password: str | None = None
    role: str | None = None


class LoginRequest(BaseModel):
    """Request body for login."""

    email: str | None = None
    password: str | None = None


class UpdateRoleRequest(BaseModel):
    """Request body for role selection."""

    role: str | None = None


def create_auth_router(
    get_service: Callable[[], AuthFlowService | None],
    get_settings: Callable[[], Settings | None],
    get_google_client: Callable[[], GoogleOAuthClient | None],
) -> APIRouter:
    """Create the auth router with injected dependencies.

    Args:
        get_service: Function returning the auth flow service
        get_settings: Function returning the application settings
        get_google_client: Function returning the Google client, or None
            when Google sign-in is not configured

    Returns:
        Configured APIRouter
    """
    router = APIRouter(prefix="/api/auth", tags=["auth"])

    def _service() -> AuthFlowService:
        service = get_service()
        if service is None:
            raise InfrastructureError("Auth service not initialized")
        return service

    def _environment() -> str:
        settings = get_settings()
        return settings.environment if settings else "development"

    @router.post("/register", status_code=201)
    async def register(request: RegisterRequest) -> dict[str, Any]:
        """Register a new user with a password and a role.

        Returns:
            The created user's public profile. No tokens are issued.
        """
        record = _service().register(
            name=request.name,
            email=request.email,
            password=request.password,
            role=request.role,
        )
        return {"message": "User registered successfully", "user": record.to_public_dict()}

    @router.post("/login")
    async def login(request: LoginRequest, response: Response) -> dict[str, Any]:
        """Authenticate with email and password.

        Sets the access and refresh cookies of the account's role only; a
        session held for the other role is left untouched.
        """
        result = _service().login(request.email, request.password)
        set_session_cookies(response, result.role, result.tokens, _environment())
        return {
            "message": "Login successful",
            "accessToken": result.tokens.access_token,
            "user": result.record.to_public_dict(),
        }

    @router.get("/refresh-token")
    async def refresh(request: Request, response: Response) -> dict[str, Any]:
        """Issue new tokens from the refresh cookie (instructor session first)."""
        result = _service().refresh(request.cookies)
        set_session_cookies(response, result.role, result.tokens, _environment())
        return {
            "accessToken": result.tokens.access_token,
            "user": result.record.to_public_dict(),
        }

    @router.post("/logout")
    async def logout(response: Response) -> dict[str, str]:
        """Clear both sessions. Needs no token and always succeeds."""
        clear_session_cookies(response, _environment())
        return {"message": "Logged out successfully"}

    @router.get("/google")
    async def google_login() -> RedirectResponse:
        """Start Google sign-in."""
        client = get_google_client()
        if client is None:
            logger.warning("Google sign-in requested but not configured")
            return RedirectResponse(
                _service().login_redirect("oauth_not_configured"), status_code=302
            )

        state = client.new_state()
        redirect = RedirectResponse(client.build_authorization_url(state), status_code=302)
        redirect.set_cookie(
            key=OAUTH_STATE_COOKIE,
            value=state,
            max_age=OAUTH_STATE_TTL,
            path="/api/auth/google",
            secure=_environment() == "production",
            httponly=True,
            samesite="lax",
        )
        return redirect

    @router.get("/google/callback")
    async def google_callback(
        request: Request,
        code: str | None = None,
        state: str | None = None,
        error: str | None = None,
    ) -> RedirectResponse:
        """Finish Google sign-in and redirect into the app.

        New accounts land on role selection; existing accounts go to their
        role's dashboard. Every failure redirects to the login page with
        ``error=auth_failed``.
        """
        service = _service()
        client = get_google_client()
        expected_state = request.cookies.get(OAUTH_STATE_COOKIE)

        failure = None
        if client is None:
            failure = "google sign-in not configured"
        elif error:
            failure = f"provider error {error}"
        elif not code:
            failure = "missing authorization code"
        elif not state or not expected_state or not secrets.compare_digest(
            state.encode(), expected_state.encode()
        ):
            failure = "state mismatch"

        outcome = None
        if failure is None:
            try:
                profile = await client.fetch_profile(code)
                outcome = service.complete_bridge(service.resolve_external(profile))
            except OAuthExchangeError as e:
                failure = f"code exchange failed: {e}"
            except InfrastructureError:
                logger.exception("Google sign-in failed on directory access")
                failure = "directory unavailable"
            except LearnForgeError as e:
                failure = e.message

        if outcome is None:
            logger.warning("Google sign-in failed: %s", failure)
            redirect = RedirectResponse(service.login_redirect("auth_failed"), status_code=302)
        else:
            redirect = RedirectResponse(outcome.redirect_url, status_code=302)
            set_session_cookies(redirect, outcome.role, outcome.tokens, _environment())

        redirect.delete_cookie(OAUTH_STATE_COOKIE, path="/api/auth/google")
        return redirect

    @router.put("/update-role")
    async def update_role(
        request: UpdateRoleRequest,
        response: Response,
        principal: Principal = Depends(authenticate_any_token),
    ) -> dict[str, Any]:
        """Set the caller's role and switch the session to it.

        The session cookies of the previous role are not cleared.
        """
        result = _service().update_role(principal, request.role)
        set_session_cookies(response, result.role, result.tokens, _environment())
        return {
            "message": "Role updated successfully",
            "accessToken": result.tokens.access_token,
            "user": result.record.to_public_dict(),
        }

    @router.get("/me")
    async def get_me(principal: Principal = Depends(authenticate_any_token)) -> dict[str, Any]:
        """Get the stored profile of the current session's user."""
        return {"user": _service().current_user(principal).to_public_dict()}

    return router
