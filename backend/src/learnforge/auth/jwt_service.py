"""JWT token generation and validation service."""

import logging
import time
from typing import Callable

import jwt

from learnforge.auth.types import Principal, Role, TokenClaims, TokenClass, TokenPair

logger = logging.getLogger(__name__)


class JWTError(Exception):
    """Base exception for JWT-related errors."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid or malformed."""

    pass


class JWTService:
    """Service for issuing and verifying role-carrying JWT tokens.

    Uses HS256 algorithm with a shared secret key. Both token classes carry
    the same identity claims (id, email, role); they differ only in lifetime
    and the ``type`` claim.
    """

    # Token TTLs
    ACCESS_TOKEN_TTL = 15 * 60  # 15 minutes
    REFRESH_TOKEN_TTL = 7 * 24 * 60 * 60  # 7 days

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the JWT service.

        Args:
            secret_key: Secret key for signing tokens (should be at least 32 chars)
            algorithm: JWT algorithm (default HS256)
            clock: Source of the current UNIX time, used for both issuance
                and expiry checks
        """
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._clock = clock

    @classmethod
    def ttl_for(cls, token_class: TokenClass) -> int:
        """Lifetime in seconds of a token class."""
        if token_class is TokenClass.REFRESH:
            return cls.REFRESH_TOKEN_TTL
        return cls.ACCESS_TOKEN_TTL

    def issue(self, principal: Principal, token_class: TokenClass) -> str:
        """Encode a principal into a signed token of the given class."""
        now = int(self._clock())
        claims = {
            "sub": str(principal.user_id),
            "email": principal.email,
            "role": principal.role.value,
            "type": token_class.value,
            "iat": now,
            "exp": now + self.ttl_for(token_class),
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def generate_token_pair(self, principal: Principal) -> TokenPair:
        """Generate a new access/refresh token pair for a principal.

        Args:
            principal: Identity and role to embed in both tokens

        Returns:
            TokenPair with access and refresh tokens
        """
        return TokenPair(
            access_token=self.issue(principal, TokenClass.ACCESS),
            refresh_token=self.issue(principal, TokenClass.REFRESH),
            expires_in=self.ACCESS_TOKEN_TTL,
        )

    def decode_token(self, token: str) -> TokenClaims:
        """Decode and validate a JWT token.

        Time claims are checked against this service's clock, never by PyJWT,
        so a token is expired from the instant ``now >= exp``.

        Args:
            token: The JWT token string

        Returns:
            TokenClaims with the decoded claims

        Raises:
            TokenExpiredError: If the token has expired
            InvalidTokenError: If the token is invalid or malformed
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": ["sub", "exp"],
                },
            )
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}")

        exp = payload.get("exp")
        if not isinstance(exp, int):
            raise InvalidTokenError("Invalid token: exp must be an integer")
        if self._clock() >= exp:
            raise TokenExpiredError("Token has expired")

        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError):
            raise InvalidTokenError("Invalid token: malformed subject")

        return TokenClaims(
            user_id=user_id,
            email=payload.get("email", ""),
            role=payload.get("role", ""),
            exp=exp,
            iat=payload.get("iat", 0),
            type=payload.get("type", TokenClass.ACCESS.value),
        )

    def verify(self, token: str) -> Principal | None:
        """Verify a token and return its principal, or None if it is not valid.

        Never raises for bad input: a bad signature, a malformed payload, an
        unknown role and an expired token all yield None.
        """
        try:
            claims = self.decode_token(token)
        except JWTError as e:
            logger.debug("Token verification failed: %s", e)
            return None

        role = Role.parse(claims.role)
        if role is None:
            logger.debug("Token verification failed: unknown role %r", claims.role)
            return None

        return Principal(user_id=claims.user_id, email=claims.email, role=role)
