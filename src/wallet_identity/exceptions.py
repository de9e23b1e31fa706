"""Identity and authentication exceptions.

These exceptions are raised by the wallet_identity package and should be
caught and handled by the caller (e.g. an HTTP layer). Every exception
carries a stable machine-readable ``code`` and a human-readable
``message``.
"""


class AuthError(Exception):
    """Base exception for all authentication errors."""

    code = "auth_error"

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


class InvalidTokenError(AuthError):
    """Raised when a JWT token is invalid, expired, or malformed."""

    code = "token_invalid"

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class WeakPasswordError(AuthError):
    """Raised when a password doesn't meet strength requirements."""

    code = "weak_password"

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message)


class PasswordMismatchError(AuthError):
    """Raised when a password and its confirmation differ."""

    code = "password_mismatch"

    def __init__(self, message: str = "Passwords do not match"):
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    """Raised when email or password is incorrect during login.

    The same message is used for unknown emails and wrong passwords.
    """

    code = "invalid_credentials"

    def __init__(self, message: str = "Incorrect email or password"):
        super().__init__(message)


class AccountDeactivatedError(AuthError):
    """Raised when a deactivated (soft-deleted) account tries to sign in."""

    code = "account_deactivated"

    def __init__(self, message: str = "Your account has been deactivated"):
        super().__init__(message)


class EmailAlreadyVerifiedError(AuthError):
    code = "already_verified"

    def __init__(self, message: str = "Email is already verified"):
        super().__init__(message)


class EmailDeliveryFailedError(AuthError):
    """Raised when the verification email could not be handed to the mailer."""

    code = "email_delivery_failed"

    def __init__(self, message: str = "Failed to send verification email"):
        super().__init__(message)


class NoVerificationCodePendingError(AuthError):
    code = "no_code_pending"

    def __init__(
        self,
        message: str = "No verification code is pending. Request a new code",
    ):
        super().__init__(message)


class VerificationCodeExpiredError(AuthError):
    code = "code_expired"

    def __init__(
        self,
        message: str = "Verification code has expired. Request a new code",
    ):
        super().__init__(message)


class InvalidVerificationCodeError(AuthError):
    code = "invalid_code"

    def __init__(self, message: str = "Invalid verification code"):
        super().__init__(message)


class ProviderExchangeFailedError(AuthError):
    """Raised when an external identity provider call fails or times out."""

    code = "provider_exchange_failed"

    def __init__(
        self,
        provider: str,
        message: str = "Authentication with the identity provider failed",
    ):
        self.provider = provider
        super().__init__(message)
