"""Google ID token verification with google-auth.

Tokens are checked locally against Google's signing certificates: signature,
expiry, audience (the configured OAuth client id) and issuer. Sign-in is
refused outright when no client id is configured.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token

from kinchart.config import settings

logger = logging.getLogger(__name__)

GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")

TokenVerifyFunc = Callable[[str, Any, str], dict[str, Any]]


class InvalidGoogleToken(Exception):
    """The token was rejected or does not belong to this app."""


class IdentityProviderError(Exception):
    """Google sign-in is unavailable: not configured or Google unreachable."""


@dataclass(frozen=True)
class GoogleIdentity:
    subject: str
    email: str
    name: str | None = None
    picture: str | None = None


class GoogleTokenVerifier:
    """Validates ID tokens issued to the configured OAuth client.

    Args:
        client_id: OAuth client id the token audience must match.
        verify_token: Called as ``verify_token(id_token, request, client_id)``;
            defaults to ``google.oauth2.id_token.verify_oauth2_token``.
        request: google-auth transport used to fetch the signing certificates.
    """

    def __init__(
        self,
        client_id: str,
        verify_token: TokenVerifyFunc = google_id_token.verify_oauth2_token,
        request: Any | None = None,
    ):
        self.client_id = client_id
        self._verify_token = verify_token
        self._request = request

    async def verify(self, id_token: str) -> GoogleIdentity:
        """Resolve an ID token to a verified Google identity.

        Raises:
            InvalidGoogleToken: Bad signature, expired, wrong audience or
                issuer, or an unverified email address.
            IdentityProviderError: No client id configured, or the signing
                certificates could not be fetched.
        """
        if not self.client_id:
            logger.error("Google sign-in attempted but GOOGLE_CLIENT_ID is not configured")
            raise IdentityProviderError("Google sign-in is not configured")

        request = self._request or google_requests.Request()
        try:
            claims = await asyncio.to_thread(self._verify_token, id_token, request, self.client_id)
        except google_exceptions.TransportError as e:
            raise IdentityProviderError(f"Failed to fetch Google certificates: {e}") from e
        except (ValueError, google_exceptions.GoogleAuthError) as e:
            raise InvalidGoogleToken(str(e)) from e

        if claims.get("aud") != self.client_id:
            raise InvalidGoogleToken("Token was issued to a different client")
        if claims.get("iss") not in GOOGLE_ISSUERS:
            raise InvalidGoogleToken("Unexpected token issuer")

        email = (claims.get("email") or "").strip().lower()
        if not email or str(claims.get("email_verified", "")).lower() != "true":
            raise InvalidGoogleToken("Google account email is not verified")

        return GoogleIdentity(
            subject=str(claims.get("sub", "")),
            email=email,
            name=claims.get("name"),
            picture=claims.get("picture"),
        )


def get_google_verifier() -> GoogleTokenVerifier:
    """FastAPI dependency returning the configured verifier."""
    return GoogleTokenVerifier(client_id=settings.google_client_id)
