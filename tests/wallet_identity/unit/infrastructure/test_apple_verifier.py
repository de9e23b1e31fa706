"""Unit tests for AppleIdentityVerifier."""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from wallet_identity.domain.user import OAuthProvider
from wallet_identity.exceptions import ProviderExchangeFailedError
from wallet_identity.infrastructure.oauth import (
    AppleIdentityVerifier,
    profile_from_apple_claims,
)
from wallet_identity.infrastructure.oauth.apple_verifier import APPLE_ISSUER

CLIENT_ID = "com.wallet.app"


def _private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


def _id_token(private_key, **overrides) -> str:
    now = datetime.now(tz=timezone.utc)
    claims = {
        "iss": APPLE_ISSUER,
        "aud": CLIENT_ID,
        "sub": "000123.apple.sub",
        "email": "ann@privaterelay.appleid.com",
        "iat": now,
        "exp": now + timedelta(minutes=10),
    }
    claims.update(overrides)
    return jwt.encode(claims, private_key, algorithm="RS256", headers={"kid": "k1"})


class TestAppleIdentityVerifier:
    """Tests for identity token verification."""

    def setup_method(self):
        """Set up test fixtures."""
        self.private_key = _private_key()
        self.jwks_client = Mock()
        self.jwks_client.get_signing_key_from_jwt.return_value = Mock(
            key=self.private_key.public_key(),
        )
        self.verifier = AppleIdentityVerifier(
            client_id=CLIENT_ID,
            jwks_client=self.jwks_client,
        )

    @pytest.mark.asyncio
    async def test_verify_valid_token(self):
        """Valid tokens return their claims."""
        token = _id_token(self.private_key)

        claims = await self.verifier.verify(token)

        assert claims["sub"] == "000123.apple.sub"
        assert claims["email"] == "ann@privaterelay.appleid.com"
        self.jwks_client.get_signing_key_from_jwt.assert_called_once_with(token)

    @pytest.mark.asyncio
    async def test_wrong_audience_rejected(self):
        """Tokens for another app are rejected."""
        token = _id_token(self.private_key, aud="com.other.app")

        with pytest.raises(ProviderExchangeFailedError) as exc_info:
            await self.verifier.verify(token)

        assert exc_info.value.provider == "apple"

    @pytest.mark.asyncio
    async def test_wrong_issuer_rejected(self):
        """Tokens not issued by Apple are rejected."""
        token = _id_token(self.private_key, iss="https://evil.example.com")

        with pytest.raises(ProviderExchangeFailedError):
            await self.verifier.verify(token)

    @pytest.mark.asyncio
    async def test_expired_token_rejected(self):
        """Expired tokens are rejected."""
        past = datetime.now(tz=timezone.utc) - timedelta(hours=1)
        token = _id_token(self.private_key, iat=past, exp=past + timedelta(minutes=5))

        with pytest.raises(ProviderExchangeFailedError, match="invalid"):
            await self.verifier.verify(token)

    @pytest.mark.asyncio
    async def test_foreign_signature_rejected(self):
        """Tokens signed with another key are rejected."""
        token = _id_token(_private_key())

        with pytest.raises(ProviderExchangeFailedError):
            await self.verifier.verify(token)

    @pytest.mark.asyncio
    async def test_key_fetch_failure(self):
        """JWKS failures become ProviderExchangeFailedError."""
        self.jwks_client.get_signing_key_from_jwt.side_effect = jwt.PyJWKClientError(
            "Fail to fetch data from the url",
        )

        with pytest.raises(ProviderExchangeFailedError, match="unavailable"):
            await self.verifier.verify(_id_token(self.private_key))


class TestProfileFromAppleClaims:
    """Tests for mapping verified claims to an OAuth profile."""

    def test_defaults_names(self):
        """Apple does not send names in the token."""
        profile = profile_from_apple_claims({"sub": "s", "email": "a@example.com"})

        assert profile.provider == OAuthProvider.APPLE
        assert profile.provider_id == "s"
        assert profile.first_name == "Apple"
        assert profile.last_name == "User"

    def test_uses_client_names(self):
        """Names passed by the client are used."""
        profile = profile_from_apple_claims(
            {"sub": "s", "email": "a@example.com"},
            first_name="Ann",
            last_name="Apfel",
        )

        assert profile.first_name == "Ann"
        assert profile.last_name == "Apfel"

    def test_missing_email_rejected(self):
        """Tokens without an email cannot be linked."""
        with pytest.raises(ProviderExchangeFailedError):
            profile_from_apple_claims({"sub": "s"})
