"""Identity schemas and data structures.

These are simple data classes used for transferring identity
data between components and back to callers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from wallet_identity.domain.user import OAuthProvider, UserRole


@dataclass(frozen=True)
class TokenPayload:
    """Decoded JWT token payload.

    Attributes
    ----------
    user_id
        The unique identifier of the user
    email
        The user's email address at issuance time
    exp
        Token expiration timestamp
    token_type
        Either "access" or "refresh"
    """

    user_id: UUID
    email: str
    exp: datetime
    token_type: str

    def is_access_token(self) -> bool:
        """Check if this is an access token."""
        return self.token_type == "access"

    def is_refresh_token(self) -> bool:
        """Check if this is a refresh token."""
        return self.token_type == "refresh"


class PublicUser(BaseModel):
    """Public projection of a user.

    Never includes the password hash or the verification code and expiry.
    """

    id: UUID
    email: str
    first_name: str
    last_name: str
    picture: Optional[str] = None
    role: UserRole
    is_email_verified: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, frozen=True)


@dataclass(frozen=True)
class AuthResult:
    """A freshly issued token pair plus the user it was issued to."""

    access_token: str
    refresh_token: str
    user: PublicUser
    kind: Literal["authenticated"] = field(default="authenticated", init=False)


@dataclass(frozen=True)
class VerificationRequired:
    """The account exists but its email must be verified first.

    Carries the email so the caller can route straight to the
    "send verification code" step.
    """

    email: str
    message: str = "Please verify your email before logging in"
    kind: Literal["verification_required"] = field(
        default="verification_required",
        init=False,
    )


AuthOutcome = Union[AuthResult, VerificationRequired]


@dataclass(frozen=True)
class VerificationEmailSent:
    email: str
    expires_at: datetime


@dataclass(frozen=True)
class OAuthProfile:
    """An identity assertion already verified by an external provider."""

    provider: OAuthProvider
    provider_id: str
    email: str
    first_name: str
    last_name: Optional[str] = None
    picture: Optional[str] = None
