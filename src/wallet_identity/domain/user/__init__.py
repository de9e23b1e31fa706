"""User domain: identity, credentials and account state.

This domain handles:
- User aggregate (identity, password hash, OAuth ids, state flags)
- Email verification material
- Role-based authorization (user vs admin)
"""

from wallet_identity.domain.user.aggregates import User
from wallet_identity.domain.user.exceptions import (
    EmailAlreadyExistsError,
    InvalidEmailError,
    UserDomainError,
    UserNotFoundError,
)
from wallet_identity.domain.user.repositories import UserRepository
from wallet_identity.domain.user.value_objects import (
    Email,
    OAuthProvider,
    UserRole,
)

__all__ = [
    "Email",
    "EmailAlreadyExistsError",
    "InvalidEmailError",
    "OAuthProvider",
    "User",
    "UserDomainError",
    "UserNotFoundError",
    "UserRepository",
    "UserRole",
]
