"""Session cookie policy.

A browser may hold a STUDENT session and an INSTRUCTOR session at the same
time. Each role owns a fixed pair of cookie slots (access + refresh), so the
two sessions never overwrite each other. The mapping is deliberately closed
over the two roles of ``Role``.

Cookie flags depend on the deployment environment: production gets
``Secure`` and ``SameSite=Strict``; everything else gets ``SameSite=Lax``
without ``Secure`` so local development over plain HTTP keeps working.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, NamedTuple

from starlette.responses import Response

from learnforge.auth.jwt_service import JWTService
from learnforge.auth.types import Role, TokenClass, TokenPair

PRODUCTION = "production"


class SlotNames(NamedTuple):
    """Cookie names holding one role's access and refresh tokens."""

    access: str
    refresh: str


SESSION_SLOTS: dict[Role, SlotNames] = {
    Role.STUDENT: SlotNames("student_token", "student_refresh_token"),
    Role.INSTRUCTOR: SlotNames("instructor_token", "instructor_refresh_token"),
}

ALL_SLOT_NAMES: tuple[str, ...] = tuple(
    name for slots in SESSION_SLOTS.values() for name in slots
)


@dataclass(frozen=True)
class CookieAttributes:
    """Transport attributes applied to a session cookie."""

    httponly: bool
    secure: bool
    samesite: str
    max_age: int
    path: str = "/"


def slot_names(role: Role) -> SlotNames:
    """Return the (access, refresh) cookie names for a role."""
    return SESSION_SLOTS[role]


def is_production(environment: str | None) -> bool:
    return (environment or "").strip().lower() == PRODUCTION


def transport_attributes(token_class: TokenClass, environment: str | None) -> CookieAttributes:
    """Cookie flags for a token class in the given environment.

    ``max_age`` always equals the lifetime of the token class, so the cookie
    and the token it carries expire together.
    """
    production = is_production(environment)
    return CookieAttributes(
        httponly=True,
        secure=production,
        samesite="strict" if production else "lax",
        max_age=JWTService.ttl_for(token_class),
    )


def set_session_cookies(
    response: Response,
    role: Role,
    tokens: TokenPair,
    environment: str | None,
) -> None:
    """Store a token pair in the role's two cookie slots."""
    names = slot_names(role)
    for name, token, token_class in (
        (names.access, tokens.access_token, TokenClass.ACCESS),
        (names.refresh, tokens.refresh_token, TokenClass.REFRESH),
    ):
        attrs = transport_attributes(token_class, environment)
        response.set_cookie(
            key=name,
            value=token,
            max_age=attrs.max_age,
            path=attrs.path,
            secure=attrs.secure,
            httponly=attrs.httponly,
            samesite=attrs.samesite,
        )


def clear_session_cookies(
    response: Response,
    environment: str | None,
    roles: Iterable[Role] = tuple(Role),
) -> None:
    """Expire the cookie slots of the given roles (default: all four slots).

    Deletion reuses the flags the cookies were set with; browsers ignore a
    deletion whose Secure/SameSite/path do not match.
    """
    for role in roles:
        names = slot_names(role)
        for name, token_class in (
            (names.access, TokenClass.ACCESS),
            (names.refresh, TokenClass.REFRESH),
        ):
            attrs = transport_attributes(token_class, environment)
            response.delete_cookie(
                key=name,
                path=attrs.path,
                secure=attrs.secure,
                httponly=attrs.httponly,
                samesite=attrs.samesite,
            )
