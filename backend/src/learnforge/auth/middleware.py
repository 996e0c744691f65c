"""Cookie-based authentication for FastAPI routes.

Routes declare which session they need:

* ``authenticate_token(Role.INSTRUCTOR)`` reads only the instructor slots and
  rejects a valid token that was issued for another role.
* ``authenticate_any_token`` accepts whichever session the browser holds,
  student slots first.

Both attach the verified principal to ``request.state.principal``. Unlike a
global middleware they reject the request themselves, so each route is gated
independently.

The role-pinned variant falls back to the refresh slot when the access slot
is empty and treats the refresh token like an access token.
"""

import logging
from typing import Callable

from starlette.requests import Request

from learnforge.auth.cookies import SESSION_SLOTS, slot_names
from learnforge.auth.jwt_service import JWTService
from learnforge.auth.types import Principal, Role
from learnforge.errors import (
    InfrastructureError,
    RoleMismatchError,
    TokenInvalidError,
    TokenMissingError,
)

logger = logging.getLogger(__name__)

# Order in which authenticate_any_token looks for a session
ANY_ROLE_SLOT_ORDER: tuple[str, ...] = tuple(
    name for role in (Role.STUDENT, Role.INSTRUCTOR) for name in SESSION_SLOTS[role]
)


def get_jwt_service(request: Request) -> JWTService:
    """Return the JWT service installed on the application at startup."""
    service = getattr(request.app.state, "jwt_service", None)
    if service is None:
        raise InfrastructureError("JWT service not initialized")
    return service


def get_principal(request: Request) -> Principal | None:
    """Get the principal attached by an authentication dependency.

    Args:
        request: The FastAPI/Starlette request

    Returns:
        Principal if authenticated, None otherwise
    """
    return getattr(request.state, "principal", None)


def _first_cookie(request: Request, names: tuple[str, ...]) -> str | None:
    for name in names:
        token = request.cookies.get(name)
        if token:
            return token
    return None


def authenticate_token(expected_role: Role) -> Callable[[Request], Principal]:
    """Create a dependency that requires a session for one specific role.

    Args:
        expected_role: Role whose cookie slots are read and whose tokens are
            accepted

    Returns:
        A FastAPI dependency function

    Example:
        @router.post("/courses")
        async def create_course(
            principal: Principal = Depends(authenticate_token(Role.INSTRUCTOR)),
        ):
            ...
    """
    names = slot_names(expected_role)

    def dependency(request: Request) -> Principal:
        token = _first_cookie(request, (names.access, names.refresh))
        if not token:
            logger.info("Rejected %s: no %s token", request.url.path, expected_role.value)
            raise TokenMissingError(expected_role.value)

        principal = get_jwt_service(request).verify(token)
        if principal is None:
            logger.info("Rejected %s: invalid %s token", request.url.path, expected_role.value)
            raise TokenInvalidError()

        if principal.role is not expected_role:
            logger.info(
                "Rejected %s: %s token in %s slot",
                request.url.path,
                principal.role.value,
                expected_role.value,
            )
            raise RoleMismatchError(expected_role.value, principal.role.value)

        request.state.principal = principal
        return principal

    return dependency


def authenticate_any_token(request: Request) -> Principal:
    """Dependency that accepts a session for either role.

    Raises:
        TokenMissingError: If no session cookie is present
        TokenInvalidError: If the first session cookie found does not verify
    """
    token = _first_cookie(request, ANY_ROLE_SLOT_ORDER)
    if not token:
        raise TokenMissingError()

    principal = get_jwt_service(request).verify(token)
    if principal is None:
        logger.info("Rejected %s: invalid token", request.url.path)
        raise TokenInvalidError()

    request.state.principal = principal
    return principal
