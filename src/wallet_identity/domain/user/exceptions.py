"""User domain exceptions.

Custom exceptions for the user domain, used for validation
and business rule violations. Each carries a stable ``code``.
"""


class UserDomainError(Exception):
    """Base exception for user domain errors."""

    code = "user_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidEmailError(UserDomainError, ValueError):
    """Raised when email format is invalid."""

    code = "invalid_email"


class EmailAlreadyExistsError(UserDomainError):
    """Email already registered."""

    code = "email_taken"

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("User with this email already exists")


class UserNotFoundError(UserDomainError):
    """User not found."""

    code = "user_not_found"

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__("User not found")
