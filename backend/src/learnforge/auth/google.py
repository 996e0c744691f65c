"""
Google OAuth 2.0 client for the sign-in bridge.

Builds the authorization URL and exchanges the returned authorization code
for the user's profile. The caller owns the ``state`` value (the endpoints
keep it in a short-lived cookie) and compares it on callback.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from urllib.parse import urlencode

import httpx

from learnforge.auth.types import ExternalProfile

logger = logging.getLogger(__name__)

AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
SCOPE = "openid email profile"


class OAuthExchangeError(Exception):
    """Raised when the code exchange or the profile lookup fails."""

    pass


@dataclass(frozen=True)
class GoogleOAuthConfig:
    client_id: str
    client_secret: str
    redirect_uri: str  # e.g., http://localhost:8000/api/auth/google/callback


class GoogleOAuthClient:
    def __init__(
        self,
        config: GoogleOAuthConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        self.cfg = config
        self._transport = transport
        self._timeout = timeout

    @staticmethod
    def new_state() -> str:
        """Generate an opaque anti-CSRF state value."""
        return secrets.token_urlsafe(32)

    def build_authorization_url(self, state: str) -> str:
        """Return the Google consent URL for this client."""
        params = {
            "client_id": self.cfg.client_id,
            "redirect_uri": self.cfg.redirect_uri,
            "response_type": "code",
            "scope": SCOPE,
            "state": state,
            "prompt": "select_account",
        }
        return f"{AUTH_URL}?{urlencode(params)}"

    async def fetch_profile(self, code: str) -> ExternalProfile:
        """Exchange an authorization code and read the signed-in user's profile.

        Raises:
            OAuthExchangeError: On transport errors, non-2xx responses or
                payloads without the expected fields
        """
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=False,
                transport=self._transport,
            ) as client:
                token_response = await client.post(
                    TOKEN_URL,
                    data={
                        "client_id": self.cfg.client_id,
                        "client_secret": self.cfg.client_secret,
                        "code": code,
                        "redirect_uri": self.cfg.redirect_uri,
                        "grant_type": "authorization_code",
                    },
                    headers={"Accept": "application/json"},
                )
                token_response.raise_for_status()
                access_token = _json_dict(token_response).get("access_token")
                if not access_token:
                    raise OAuthExchangeError("token response has no access_token")

                userinfo_response = await client.get(
                    USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                userinfo_response.raise_for_status()
                userinfo = _json_dict(userinfo_response)
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Google OAuth request failed with status %s", e.response.status_code
            )
            raise OAuthExchangeError(f"provider returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("Google OAuth request failed: %s", e.__class__.__name__)
            raise OAuthExchangeError("provider unreachable") from e

        subject = userinfo.get("sub")
        if not subject:
            raise OAuthExchangeError("userinfo has no subject")

        return ExternalProfile(
            provider="google",
            subject=str(subject),
            email=userinfo.get("email"),
            display_name=userinfo.get("name"),
        )


def _json_dict(response: httpx.Response) -> dict:
    try:
        payload = response.json()
    except ValueError as e:
        raise OAuthExchangeError("provider returned invalid JSON") from e
    if not isinstance(payload, dict):
        raise OAuthExchangeError("provider returned unexpected JSON")
    return payload
