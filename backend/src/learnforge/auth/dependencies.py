"""FastAPI dependencies for role authorization."""

from typing import Callable

from starlette.requests import Request

from learnforge.auth.middleware import get_principal
from learnforge.auth.types import Principal, Role
from learnforge.errors import ForbiddenError, UnauthenticatedError


def require_authenticated(request: Request) -> Principal:
    """Dependency that requires an already attached principal.

    Args:
        request: The FastAPI request

    Returns:
        The principal attached by an authentication dependency

    Raises:
        UnauthenticatedError: If no principal is attached
    """
    principal = get_principal(request)
    if principal is None:
        raise UnauthenticatedError("Unauthorized")
    return principal


def authorize_roles(*allowed_roles: Role) -> Callable[[Request], Principal]:
    """Create a dependency that requires one of the given roles.

    Must run after an authentication dependency; it performs no I/O and only
    inspects ``request.state.principal``. List the authentication dependency
    first in the route's ``dependencies`` so it is resolved first.

    Args:
        allowed_roles: Roles permitted to use the route

    Returns:
        A FastAPI dependency function

    Example:
        @router.get(
            "/analytics",
            dependencies=[
                Depends(authenticate_token(Role.INSTRUCTOR)),
                Depends(authorize_roles(Role.INSTRUCTOR)),
            ],
        )
    """
    allowed = tuple(Role(r) for r in allowed_roles)

    def dependency(request: Request) -> Principal:
        principal = require_authenticated(request)
        if principal.role not in allowed:
            raise ForbiddenError(tuple(r.value for r in allowed))
        return principal

    return dependency
