"""External identity provider adapters."""

from wallet_identity.infrastructure.oauth.apple_verifier import (
    AppleIdentityVerifier,
    profile_from_apple_claims,
)
from wallet_identity.infrastructure.oauth.google_client import (
    GoogleOAuthClient,
    GoogleProfile,
)

__all__ = [
    "AppleIdentityVerifier",
    "GoogleOAuthClient",
    "GoogleProfile",
    "profile_from_apple_claims",
]
