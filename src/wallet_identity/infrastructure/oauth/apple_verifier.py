"""Verification of Sign in with Apple identity tokens."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import jwt

from wallet_identity.domain.user import OAuthProvider
from wallet_identity.exceptions import ProviderExchangeFailedError
from wallet_identity.schemas import OAuthProfile

logger = logging.getLogger(__name__)

APPLE_ISSUER = "https://appleid.apple.com"
APPLE_KEYS_URL = "https://appleid.apple.com/auth/keys"

PROVIDER = OAuthProvider.APPLE.value


def profile_from_apple_claims(
    claims: dict[str, Any],
    first_name: str | None = None,
    last_name: str | None = None,
) -> OAuthProfile:
    """Build an OAuth profile from verified Apple token claims.

    Apple only sends the user's name to the client on the first sign in,
    so the names are passed in separately and fall back to placeholders.
    """
    subject = claims.get("sub")
    email = claims.get("email")
    if not subject or not email:
        msg = "Apple identity token has no subject or email"
        raise ProviderExchangeFailedError(PROVIDER, msg)

    return OAuthProfile(
        provider=OAuthProvider.APPLE,
        provider_id=str(subject),
        email=email,
        first_name=first_name or "Apple",
        last_name=last_name or "User",
    )


class AppleIdentityVerifier:
    """Verifies Apple identity tokens against Apple's published keys.

    Key retrieval is bounded by ``timeout``; failures surface as
    ``ProviderExchangeFailedError``.
    """

    ALGORITHMS = ["RS256"]

    def __init__(
        self,
        client_id: str,
        timeout: float = 10.0,
        jwks_client: jwt.PyJWKClient | None = None,
    ):
        self._client_id = client_id
        self._jwks_client = jwks_client or jwt.PyJWKClient(
            APPLE_KEYS_URL,
            timeout=int(timeout),
        )

    async def verify(self, id_token: str) -> dict[str, Any]:
        """Return the verified claims of ``id_token``."""
        # PyJWKClient fetches keys with blocking I/O
        return await asyncio.to_thread(self._verify_sync, id_token)

    def _verify_sync(self, id_token: str) -> dict[str, Any]:
        try:
            signing_key = self._jwks_client.get_signing_key_from_jwt(id_token)
            return jwt.decode(
                id_token,
                signing_key.key,
                algorithms=self.ALGORITHMS,
                audience=self._client_id,
                issuer=APPLE_ISSUER,
            )
        except jwt.PyJWKClientError as e:
            logger.warning("Could not fetch Apple signing keys: %s", e)
            msg = "Apple signing keys are unavailable"
            raise ProviderExchangeFailedError(PROVIDER, msg) from e
        except jwt.InvalidTokenError as e:
            logger.warning("Rejected Apple identity token: %s", e)
            msg = "Apple identity token is invalid"
            raise ProviderExchangeFailedError(PROVIDER, msg) from e
