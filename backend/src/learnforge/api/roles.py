"""Role-gated session probes.

Each router gates its routes with the role-pinned authentication dependency
followed by the role authorization dependency, the wiring used by every
student- or instructor-only route of the platform.
"""

from typing import Any

from fastapi import APIRouter, Depends, Request

from learnforge.auth import Role, authenticate_token, authorize_roles, get_principal


def create_role_router(role: Role) -> APIRouter:
    """Create ``/api/<role>`` with a ``/session`` route for that role only."""
    router = APIRouter(
        prefix=f"/api/{role.value.lower()}",
        tags=[role.value.lower()],
        dependencies=[
            Depends(authenticate_token(role)),
            Depends(authorize_roles(role)),
        ],
    )

    @router.get("/session")
    async def session(request: Request) -> dict[str, Any]:
        """Return the principal of the current session for this role."""
        return {"principal": get_principal(request).to_dict()}

    return router
