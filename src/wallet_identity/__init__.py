"""Wallet Identity - accounts, credentials and authentication.

This module handles all identity-related concerns:
- User accounts (email, profile, role, activity flag)
- Authentication (signup, login, token refresh)
- Email ownership proof (six digit verification codes)
- Sign in through Google and Apple with account linking
- Email notifications (welcome, verification code)

Everything else in the wallet only references user_id, keeping identity
concerns separated.
"""

from wallet_identity.application.context import UserContext
from wallet_identity.application.notifications import (
    NotificationDispatcher,
    wait_for_notifications,
)
from wallet_identity.application.services import (
    AuthenticationService,
    OAuthAccountLinker,
)
from wallet_identity.config import AuthConfig
from wallet_identity.container import IdentityContainer
from wallet_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    InvalidEmailError,
    OAuthProvider,
    User,
    UserDomainError,
    UserNotFoundError,
    UserRepository,
    UserRole,
)
from wallet_identity.exceptions import (
    AccountDeactivatedError,
    AuthError,
    EmailAlreadyVerifiedError,
    EmailDeliveryFailedError,
    InvalidCredentialsError,
    InvalidTokenError,
    InvalidVerificationCodeError,
    NoVerificationCodePendingError,
    PasswordMismatchError,
    ProviderExchangeFailedError,
    VerificationCodeExpiredError,
    WeakPasswordError,
)
from wallet_identity.schemas import (
    AuthOutcome,
    AuthResult,
    OAuthProfile,
    PublicUser,
    TokenPayload,
    VerificationEmailSent,
    VerificationRequired,
)
from wallet_identity.services import (
    JWTService,
    PasswordHashingService,
    VerificationCode,
    VerificationCodeGenerator,
)

__all__ = [
    # Domain - User
    "Email",
    "EmailAlreadyExistsError",
    "InvalidEmailError",
    "OAuthProvider",
    "User",
    "UserDomainError",
    "UserNotFoundError",
    "UserRepository",
    "UserRole",
    # Exceptions
    "AccountDeactivatedError",
    "AuthError",
    "EmailAlreadyVerifiedError",
    "EmailDeliveryFailedError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "InvalidVerificationCodeError",
    "NoVerificationCodePendingError",
    "PasswordMismatchError",
    "ProviderExchangeFailedError",
    "VerificationCodeExpiredError",
    "WeakPasswordError",
    # Schemas
    "AuthOutcome",
    "AuthResult",
    "OAuthProfile",
    "PublicUser",
    "TokenPayload",
    "VerificationEmailSent",
    "VerificationRequired",
    # Services
    "JWTService",
    "PasswordHashingService",
    "VerificationCode",
    "VerificationCodeGenerator",
    # Configuration and wiring
    "AuthConfig",
    "IdentityContainer",
    # Application
    "AuthenticationService",
    "NotificationDispatcher",
    "OAuthAccountLinker",
    "UserContext",
    "wait_for_notifications",
]
