"""Unit tests for GoogleOAuthClient using httpx.MockTransport."""

from urllib.parse import parse_qs

import httpx
import pytest

from wallet_identity.exceptions import ProviderExchangeFailedError
from wallet_identity.infrastructure.oauth import GoogleOAuthClient, GoogleProfile
from wallet_identity.infrastructure.oauth.google_client import (
    GOOGLE_TOKEN_URL,
    GOOGLE_USERINFO_URL,
)

PROFILE_PAYLOAD = {
    "id": "1234567890",
    "email": "gina@example.com",
    "given_name": "Gina",
    "family_name": "Oogle",
    "picture": "https://lh3.googleusercontent.com/a/pic",
    "verified_email": True,
}


def _client(handler) -> GoogleOAuthClient:
    return GoogleOAuthClient(
        client_id="client-id",
        client_secret="client-secret",
        timeout=10.0,
        transport=httpx.MockTransport(handler),
    )


class TestExchangeCode:
    """Tests for the authorization code exchange."""

    @pytest.mark.asyncio
    async def test_exchange_code_posts_pkce_form(self):
        """The token request carries the PKCE verifier and client credentials."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["method"] = request.method
            seen["form"] = parse_qs(request.content.decode())
            return httpx.Response(200, json={"access_token": "ya29.token"})

        token = await _client(handler).exchange_code(
            code="auth-code",
            redirect_uri="com.wallet.app:/oauth2redirect",
            code_verifier="verifier-123",
        )

        assert token == "ya29.token"
        assert seen["url"] == GOOGLE_TOKEN_URL
        assert seen["method"] == "POST"
        assert seen["form"]["code"] == ["auth-code"]
        assert seen["form"]["code_verifier"] == ["verifier-123"]
        assert seen["form"]["grant_type"] == ["authorization_code"]
        assert seen["form"]["client_id"] == ["client-id"]
        assert seen["form"]["client_secret"] == ["client-secret"]

    @pytest.mark.asyncio
    async def test_exchange_code_rejected(self):
        """A 400 from Google becomes ProviderExchangeFailedError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "invalid_grant"})

        with pytest.raises(ProviderExchangeFailedError) as exc_info:
            await _client(handler).exchange_code("bad", "uri", "verifier")

        assert exc_info.value.provider == "google"
        assert exc_info.value.code == "provider_exchange_failed"

    @pytest.mark.asyncio
    async def test_exchange_code_timeout(self):
        """Timeouts become ProviderExchangeFailedError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(ProviderExchangeFailedError, match="in time"):
            await _client(handler).exchange_code("code", "uri", "verifier")

    @pytest.mark.asyncio
    async def test_exchange_code_without_access_token(self):
        """A success response without a token is still a failure."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"id_token": "only-id-token"})

        with pytest.raises(ProviderExchangeFailedError, match="access token"):
            await _client(handler).exchange_code("code", "uri", "verifier")

    @pytest.mark.asyncio
    async def test_exchange_code_invalid_json(self):
        """Non-JSON bodies are rejected."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>oops</html>")

        with pytest.raises(ProviderExchangeFailedError):
            await _client(handler).exchange_code("code", "uri", "verifier")


class TestFetchProfile:
    """Tests for the userinfo request."""

    @pytest.mark.asyncio
    async def test_fetch_profile(self):
        """The bearer token is sent and the profile parsed."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json=PROFILE_PAYLOAD)

        profile = await _client(handler).fetch_profile("ya29.token")

        assert seen["url"] == GOOGLE_USERINFO_URL
        assert seen["auth"] == "Bearer ya29.token"
        assert profile.id == "1234567890"
        assert profile.email == "gina@example.com"
        assert profile.verified_email is True

    @pytest.mark.asyncio
    async def test_fetch_profile_missing_email(self):
        """Profiles without an email are rejected."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"id": "1"})

        with pytest.raises(ProviderExchangeFailedError, match="email"):
            await _client(handler).fetch_profile("token")

    @pytest.mark.asyncio
    async def test_fetch_profile_connection_error(self):
        """Network failures become ProviderExchangeFailedError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ProviderExchangeFailedError):
            await _client(handler).fetch_profile("token")


class TestGoogleProfile:
    """Tests for the profile mapping."""

    def test_to_oauth_profile_defaults(self):
        """Missing names fall back to placeholders."""
        profile = GoogleProfile.from_payload({"id": 42, "email": "x@example.com"})
        oauth_profile = profile.to_oauth_profile()

        assert oauth_profile.provider_id == "42"
        assert oauth_profile.first_name == "Google"
        assert oauth_profile.last_name == "User"
        assert oauth_profile.picture is None
        assert profile.verified_email is False
