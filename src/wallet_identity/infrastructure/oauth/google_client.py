"""HTTP client for Google's OAuth 2.0 endpoints (mobile PKCE flow)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from wallet_identity.domain.user import OAuthProvider
from wallet_identity.exceptions import ProviderExchangeFailedError
from wallet_identity.schemas import OAuthProfile

logger = logging.getLogger(__name__)

GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"

PROVIDER = OAuthProvider.GOOGLE.value


@dataclass(frozen=True)
class GoogleProfile:
    id: str
    email: str
    given_name: str | None
    family_name: str | None
    picture: str | None
    verified_email: bool

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> GoogleProfile:
        return cls(
            id=str(payload["id"]),
            email=payload["email"],
            given_name=payload.get("given_name"),
            family_name=payload.get("family_name"),
            picture=payload.get("picture"),
            verified_email=bool(payload.get("verified_email", False)),
        )

    def to_oauth_profile(self) -> OAuthProfile:
        return OAuthProfile(
            provider=OAuthProvider.GOOGLE,
            provider_id=self.id,
            email=self.email,
            first_name=self.given_name or "Google",
            last_name=self.family_name or "User",
            picture=self.picture,
        )


class GoogleOAuthClient:
    """Exchanges authorization codes and fetches the Google profile.

    Every request is bounded by ``timeout``; there are no retries. Any
    transport, status or payload problem surfaces as
    ``ProviderExchangeFailedError``.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def exchange_code(
        self,
        code: str,
        redirect_uri: str,
        code_verifier: str,
    ) -> str:
        """Exchange an authorization code for a Google access token."""
        data = {
            "code": code,
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "redirect_uri": redirect_uri,
            "grant_type": "authorization_code",
            "code_verifier": code_verifier,
        }
        payload = await self._request("POST", GOOGLE_TOKEN_URL, data=data)
        access_token = payload.get("access_token")
        if not access_token:
            raise ProviderExchangeFailedError(
                PROVIDER,
                "Google token response did not contain an access token",
            )
        return access_token

    async def fetch_profile(self, access_token: str) -> GoogleProfile:
        payload = await self._request(
            "GET",
            GOOGLE_USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        try:
            return GoogleProfile.from_payload(payload)
        except KeyError as e:
            raise ProviderExchangeFailedError(
                PROVIDER,
                f"Google profile is missing field {e}",
            ) from e

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            async with self._client() as client:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
                payload = response.json()
        except httpx.TimeoutException as e:
            logger.warning("Google OAuth timeout calling %s: %s", url, e)
            msg = "Google did not respond in time"
            raise ProviderExchangeFailedError(PROVIDER, msg) from e
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Google OAuth returned error %d: %s",
                e.response.status_code,
                e.response.text[:200] if e.response.text else "no body",
            )
            msg = "Google rejected the authorization request"
            raise ProviderExchangeFailedError(PROVIDER, msg) from e
        except httpx.HTTPError as e:
            logger.warning("Google OAuth request failed (%s): %s", type(e).__name__, e)
            raise ProviderExchangeFailedError(PROVIDER) from e
        except ValueError as e:
            logger.warning("Google OAuth returned invalid JSON: %s", e)
            raise ProviderExchangeFailedError(PROVIDER) from e

        if not isinstance(payload, dict):
            raise ProviderExchangeFailedError(PROVIDER)
        return payload
