"""Authentication flows: register, login, refresh, Google bridge and role selection.

The service is framework independent. It returns records and token pairs;
the HTTP layer (``learnforge.auth.endpoints``) decides which cookie slots to
write. Nothing is kept between calls: every flow reads and writes only the
directory and the values handed to it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping

from learnforge.auth.bridge import IdentityBridge
from learnforge.auth.cookies import slot_names
from learnforge.auth.jwt_service import JWTService
from learnforge.auth.password import PasswordService
from learnforge.auth.types import (
    BridgedIdentity,
    CredentialRecord,
    ExternalProfile,
    Principal,
    Role,
    TokenPair,
)
from learnforge.errors import (
    ConflictError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)

if TYPE_CHECKING:
    from learnforge.persistence.adapter import UserDirectory

logger = logging.getLogger(__name__)

# Refresh looks at the instructor session before the student session
REFRESH_SLOT_ORDER: tuple[Role, ...] = (Role.INSTRUCTOR, Role.STUDENT)

ROLE_SELECTION_PATH = "/select-role"
DASHBOARD_PATHS: dict[Role, str] = {
    Role.STUDENT: "/student/dashboard",
    Role.INSTRUCTOR: "/instructor/dashboard",
}
LOGIN_PATH = "/login"


@dataclass
class AuthResult:
    """A record together with freshly issued tokens for its role."""

    record: CredentialRecord
    tokens: TokenPair

    @property
    def role(self) -> Role:
        return self.record.role


@dataclass
class BridgeOutcome(AuthResult):
    """Result of a completed Google sign-in, including where to send the browser."""

    is_new_user: bool = False
    redirect_url: str = ""


def _require_fields(**fields: Any) -> None:
    missing = [
        name
        for name, value in fields.items()
        if value is None or (isinstance(value, str) and not value.strip())
    ]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


class AuthFlowService:
    """Implements the user-facing authentication flows."""

    def __init__(
        self,
        directory: UserDirectory,
        jwt_service: JWTService,
        password_service: PasswordService,
        client_url: str = "http://localhost:5173",
    ):
        self._directory = directory
        self._jwt = jwt_service
        self._passwords = password_service
        self._bridge = IdentityBridge(directory)
        self._client_url = client_url.rstrip("/")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _issue(self, record: CredentialRecord) -> AuthResult:
        return AuthResult(record=record, tokens=self._jwt.generate_token_pair(record.to_principal()))

    @staticmethod
    def _parse_role(value: Any) -> Role:
        role = Role.parse(value)
        if role is None:
            allowed = ", ".join(r.value for r in Role)
            raise ValidationError(f"Invalid role. Must be one of: {allowed}")
        return role

    def login_redirect(self, error: str) -> str:
        """URL of the frontend login page carrying an error code."""
        return f"{self._client_url}{LOGIN_PATH}?error={error}"

    def redirect_for(self, identity: BridgedIdentity) -> str:
        """Where to send the browser after a Google sign-in."""
        if identity.is_new_user:
            return f"{self._client_url}{ROLE_SELECTION_PATH}"
        return f"{self._client_url}{DASHBOARD_PATHS[identity.record.role]}"

    # ------------------------------------------------------------------
    # Flows
    # ------------------------------------------------------------------

    def register(
        self,
        name: str | None,
        email: str | None,
        password: str | None,
        role: str | Role | None,
    ) -> CredentialRecord:
        """Create a password account. Issues no tokens.

        Raises:
            ValidationError: If a field is missing or the role is unknown
            ConflictError: If the email is already registered
        """
        _require_fields(name=name, email=email, password=password, role=role)
        parsed_role = self._parse_role(role)
        email = email.strip()

        if self._directory.get_by_email(email):
            raise ConflictError("Email already exists")

        record = self._directory.create(
            name=name.strip(),
            email=email,
            role=parsed_role,
            password_hash=self._passwords.hash(password),
        )
        logger.info("Registered user %s as %s", record.id, record.role.value)
        return record

    def login(self, email: str | None, password: str | None) -> AuthResult:
        """Check a password and issue both tokens for the account's role.

        Raises:
            ValidationError: If email or password is missing
            NotFoundError: If no account has this email
            UnauthenticatedError: If the account has no password (Google only)
                or the password does not match
        """
        _require_fields(email=email, password=password)

        record = self._directory.get_by_email(email.strip())
        if record is None:
            raise NotFoundError("Invalid credentials")

        if not record.has_password:
            logger.info("Password login refused for Google-only user %s", record.id)
            raise UnauthenticatedError(
                "This account uses Google sign-in. Please log in with Google."
            )

        if not self._passwords.verify(password, record.password_hash):
            logger.info("Password mismatch for user %s", record.id)
            raise UnauthenticatedError("Invalid credentials")

        return self._issue(record)

    def refresh(self, cookies: Mapping[str, str]) -> AuthResult:
        """Reissue both tokens from a refresh cookie.

        The new tokens carry the role currently stored for the user, not the
        role embedded in the presented token. The presented refresh token is
        not revoked and stays valid until its own expiry.

        Raises:
            UnauthenticatedError: If no refresh cookie is present, it does not
                verify, or its user no longer exists
        """
        token = None
        for role in REFRESH_SLOT_ORDER:
            token = cookies.get(slot_names(role).refresh)
            if token:
                break
        if not token:
            raise UnauthenticatedError("Refresh token missing")

        principal = self._jwt.verify(token)
        if principal is None:
            raise UnauthenticatedError("Invalid or expired refresh token")

        record = self._directory.get_by_id(principal.user_id)
        if record is None:
            raise UnauthenticatedError("User no longer exists")

        return self._issue(record)

    def resolve_external(self, profile: ExternalProfile) -> BridgedIdentity:
        """Map a Google profile to a local record (see IdentityBridge)."""
        return self._bridge.resolve(profile)

    def complete_bridge(self, identity: BridgedIdentity) -> BridgeOutcome:
        """Issue tokens for a bridged identity and pick the redirect target."""
        result = self._issue(identity.record)
        return BridgeOutcome(
            record=result.record,
            tokens=result.tokens,
            is_new_user=identity.is_new_user,
            redirect_url=self.redirect_for(identity),
        )

    def update_role(self, principal: Principal, role: str | Role | None) -> AuthResult:
        """Persist a role choice and issue tokens for the new role.

        Raises:
            ValidationError: If the role is missing or unknown
            NotFoundError: If the principal's user no longer exists
        """
        _require_fields(role=role)
        new_role = self._parse_role(role)

        record = self._directory.update_role(principal.user_id, new_role)
        if record is None:
            raise NotFoundError("User not found")

        logger.info(
            "User %s switched role %s -> %s",
            record.id,
            principal.role.value,
            record.role.value,
        )
        return self._issue(record)

    def current_user(self, principal: Principal) -> CredentialRecord:
        """Stored record of an authenticated principal."""
        record = self._directory.get_by_id(principal.user_id)
        if record is None:
            raise NotFoundError("User not found")
        return record
