"""User aggregate: identity, credentials and account state."""

from datetime import datetime
from typing import Union
from uuid import UUID, uuid4

from wallet_identity.domain.shared.time import utc_now
from wallet_identity.domain.user.value_objects import Email, OAuthProvider, UserRole


class User:
    """
    User aggregate root.

    Holds the identity (id, normalized email), the optional credentials
    (password hash, Google and Apple subject ids), the profile and the
    account state flags. The email verification code and its expiry are
    only ever set and cleared together.
    """

    def __init__(  # noqa: PLR0913
        self,
        email: Union[str, Email],
        first_name: str,
        last_name: str,
        role: Union[str, UserRole] = UserRole.USER,
        password_hash: str | None = None,
        google_id: str | None = None,
        apple_id: str | None = None,
        picture: str | None = None,
        is_active: bool = True,
        is_email_verified: bool = False,
        email_verification_token: str | None = None,
        email_verification_token_expires_at: datetime | None = None,
        id: UUID | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        if (email_verification_token is None) != (
            email_verification_token_expires_at is None
        ):
            msg = "Verification code and expiry must be set together"
            raise ValueError(msg)

        self._email = email if isinstance(email, Email) else Email(email)
        self._id = id or uuid4()
        self._first_name = first_name
        self._last_name = last_name
        self._role = role if isinstance(role, UserRole) else UserRole(role)
        self._password_hash = password_hash
        self._google_id = google_id
        self._apple_id = apple_id
        self._picture = picture
        self._is_active = is_active
        self._is_email_verified = is_email_verified
        self._verification_token = email_verification_token
        self._verification_token_expires_at = email_verification_token_expires_at
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at or utc_now()

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def email_obj(self) -> Email:
        return self._email

    @property
    def first_name(self) -> str:
        return self._first_name

    @property
    def last_name(self) -> str:
        return self._last_name

    @property
    def picture(self) -> str | None:
        return self._picture

    @property
    def role(self) -> UserRole:
        return self._role

    @property
    def is_admin(self) -> bool:
        return self._role == UserRole.ADMIN

    @property
    def password_hash(self) -> str | None:
        return self._password_hash

    @property
    def has_password(self) -> bool:
        return bool(self._password_hash)

    @property
    def google_id(self) -> str | None:
        return self._google_id

    @property
    def apple_id(self) -> str | None:
        return self._apple_id

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def is_email_verified(self) -> bool:
        return self._is_email_verified

    @property
    def email_verification_token(self) -> str | None:
        return self._verification_token

    @property
    def email_verification_token_expires_at(self) -> datetime | None:
        return self._verification_token_expires_at

    @property
    def has_pending_verification(self) -> bool:
        return self._verification_token is not None

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def change_password_hash(self, password_hash: str) -> None:
        self._password_hash = password_hash
        self._touch()

    def set_verification_code(self, code: str, expires_at: datetime) -> None:
        """Store a new verification code, replacing any unused one."""
        self._verification_token = code
        self._verification_token_expires_at = expires_at
        self._touch()

    def mark_email_verified(self) -> None:
        """Flip to verified and clear the verification code with its expiry."""
        self._is_email_verified = True
        self._verification_token = None
        self._verification_token_expires_at = None
        self._touch()

    def provider_id(self, provider: OAuthProvider) -> str | None:
        if provider == OAuthProvider.GOOGLE:
            return self._google_id
        if provider == OAuthProvider.APPLE:
            return self._apple_id
        return None

    def link_oauth_identity(self, provider: OAuthProvider, provider_id: str) -> bool:
        """Record the provider subject id if none is stored yet.

        Returns True when the aggregate changed. Existing ids are never
        overwritten.
        """
        if not provider_id:
            return False
        if provider == OAuthProvider.GOOGLE and self._google_id is None:
            self._google_id = provider_id
        elif provider == OAuthProvider.APPLE and self._apple_id is None:
            self._apple_id = provider_id
        else:
            return False
        self._touch()
        return True

    def backfill_picture(self, picture: str | None) -> bool:
        """Set the picture only when the user has none."""
        if not picture or self._picture:
            return False
        self._picture = picture
        self._touch()
        return True

    def deactivate(self) -> None:
        self._is_active = False
        self._touch()

    def promote_to_admin(self) -> None:
        self._role = UserRole.ADMIN
        self._touch()

    def demote_to_user(self) -> None:
        self._role = UserRole.USER
        self._touch()

    def _touch(self) -> None:
        self._updated_at = utc_now()

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        email: Union[str, Email],
        first_name: str,
        last_name: str,
        password_hash: str | None = None,
        picture: str | None = None,
        role: UserRole = UserRole.USER,
    ) -> "User":
        """Create a user signing up with a password (unverified)."""
        return cls(
            email=email,
            first_name=first_name,
            last_name=last_name,
            password_hash=password_hash,
            picture=picture,
            role=role,
        )

    @classmethod
    def create_from_oauth(  # noqa: PLR0913
        cls,
        email: Union[str, Email],
        first_name: str,
        last_name: str,
        provider: OAuthProvider,
        provider_id: str,
        picture: str | None = None,
    ) -> "User":
        """Create a user from a provider-verified identity.

        The provider already proved mailbox ownership, so the email starts
        out verified and no password is set.
        """
        return cls(
            email=email,
            first_name=first_name,
            last_name=last_name,
            google_id=provider_id if provider == OAuthProvider.GOOGLE else None,
            apple_id=provider_id if provider == OAuthProvider.APPLE else None,
            picture=picture,
            is_email_verified=True,
        )

    @classmethod
    def reconstitute(  # noqa: PLR0913
        cls,
        id: UUID,
        email: Union[str, Email],
        first_name: str,
        last_name: str,
        role: Union[str, UserRole],
        password_hash: str | None,
        google_id: str | None,
        apple_id: str | None,
        picture: str | None,
        is_active: bool,
        is_email_verified: bool,
        email_verification_token: str | None,
        email_verification_token_expires_at: datetime | None,
        created_at: datetime,
        updated_at: datetime,
    ) -> "User":
        return cls(
            id=id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            role=role,
            password_hash=password_hash,
            google_id=google_id,
            apple_id=apple_id,
            picture=picture,
            is_active=is_active,
            is_email_verified=is_email_verified,
            email_verification_token=email_verification_token,
            email_verification_token_expires_at=email_verification_token_expires_at,
            created_at=created_at,
            updated_at=updated_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"User(id={self._id}, email={self._email.value})"
