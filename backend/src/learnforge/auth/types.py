"""Type definitions for authentication."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Role(str, Enum):
    """The two roles a principal can act under."""

    STUDENT = "STUDENT"
    INSTRUCTOR = "INSTRUCTOR"

    @classmethod
    def parse(cls, value: Any) -> "Role | None":
        """Return the Role for a case-insensitive name, or None if it is not one."""
        if isinstance(value, Role):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


class TokenClass(str, Enum):
    """Issuance class of a token. Determines its lifetime."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class Principal:
    """The identity asserted by a verified token.

    Attributes:
        user_id: The user's ID in the directory
        email: User's email address at issuance time
        role: Role the token was issued for
    """

    user_id: int
    email: str
    role: Role

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.user_id, "email": self.email, "role": self.role.value}


@dataclass
class TokenClaims:
    """Claims embedded in a JWT token.

    Attributes:
        user_id: The authenticated user's ID (``sub``)
        email: The user's email
        role: The role name as found in the token (not yet validated)
        exp: Token expiration timestamp
        iat: Token issued-at timestamp
        type: Token class ("access" or "refresh")
    """

    user_id: int
    email: str
    role: str
    exp: int = 0
    iat: int = 0
    type: str = TokenClass.ACCESS.value


@dataclass
class TokenPair:
    """A pair of access and refresh tokens.

    Attributes:
        access_token: Short-lived token for API access (15 min)
        refresh_token: Long-lived token for getting new access tokens (7 days)
        token_type: Always "Bearer"
        expires_in: Access token TTL in seconds
    """

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = 900  # 15 minutes


@dataclass
class CredentialRecord:
    """A user row as stored in the directory.

    ``password_hash`` is None for accounts provisioned through Google sign-in;
    those accounts cannot log in with a password.
    """

    id: int
    name: str
    email: str
    role: Role
    password_hash: str | None = None
    created_at: str | None = None

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)

    def to_principal(self) -> Principal:
        return Principal(user_id=self.id, email=self.email, role=self.role)

    def to_public_dict(self) -> dict[str, Any]:
        """Profile fields that are safe to return to the client."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
        }


@dataclass(frozen=True)
class ExternalProfile:
    """Identity returned by an external provider's userinfo endpoint."""

    provider: str
    subject: str
    email: str | None
    display_name: str | None = None


@dataclass(frozen=True)
class BridgedIdentity:
    """Result of resolving an external profile to a local record.

    Attributes:
        record: The existing or newly created credential record
        is_new_user: True when the record was created by this resolution and
            still carries the provisional role
    """

    record: CredentialRecord
    is_new_user: bool
