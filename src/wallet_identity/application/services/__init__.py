"""Application services for identity management."""

from wallet_identity.application.services.authentication_service import (
    AuthenticationService,
)
from wallet_identity.application.services.oauth_account_linker import (
    OAuthAccountLinker,
)

__all__ = ["AuthenticationService", "OAuthAccountLinker"]
