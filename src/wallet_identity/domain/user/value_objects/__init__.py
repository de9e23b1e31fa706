"""Value objects for the user domain."""

from wallet_identity.domain.user.value_objects.email import Email
from wallet_identity.domain.user.value_objects.oauth_provider import OAuthProvider
from wallet_identity.domain.user.value_objects.user_role import UserRole

__all__ = [
    "Email",
    "OAuthProvider",
    "UserRole",
]
