"""
In-memory test doubles for the identity ports.

``InMemoryUserRepository`` behaves like the SQLAlchemy repository as far
as the authentication flows can observe: unique emails and provider ids,
detached copies on every read, and a conditional verification-code update.

Usage:
    from tests.shared.fakes import InMemoryUserRepository

    repo = InMemoryUserRepository()
    service = AuthenticationService(user_repository=repo, ...)
"""

from typing import Union
from uuid import UUID

from wallet_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    User,
    UserRepository,
)
from wallet_identity.infrastructure.email import EmailService


def _copy(user: User) -> User:
    return User.reconstitute(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role,
        password_hash=user.password_hash,
        google_id=user.google_id,
        apple_id=user.apple_id,
        picture=user.picture,
        is_active=user.is_active,
        is_email_verified=user.is_email_verified,
        email_verification_token=user.email_verification_token,
        email_verification_token_expires_at=user.email_verification_token_expires_at,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[UUID, User] = {}
        self.save_calls = 0

    def add(self, user: User) -> User:
        """Seed a user without going through ``save``."""
        self._users[user.id] = _copy(user)
        return user

    def get(self, user_id: UUID) -> User:
        """Return the stored state of a user (a copy)."""
        return _copy(self._users[user_id])

    async def find_by_id(self, user_id: UUID) -> User | None:
        user = self._users.get(user_id)
        return _copy(user) if user else None

    async def find_by_email(self, email: Union[str, Email]) -> User | None:
        value = email.value if isinstance(email, Email) else Email(email).value
        return self._find(lambda u: u.email == value)

    async def find_by_google_id(self, google_id: str) -> User | None:
        return self._find(lambda u: u.google_id == google_id)

    async def find_by_apple_id(self, apple_id: str) -> User | None:
        return self._find(lambda u: u.apple_id == apple_id)

    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        return await self.find_by_email(email) is not None

    async def save(self, user: User) -> None:
        for other in self._users.values():
            if other.id == user.id:
                continue
            if (
                other.email == user.email
                or (user.google_id and other.google_id == user.google_id)
                or (user.apple_id and other.apple_id == user.apple_id)
            ):
                raise EmailAlreadyExistsError(user.email)
        self._users[user.id] = _copy(user)
        self.save_calls += 1

    async def consume_verification_code(self, user_id: UUID, code: str) -> bool:
        user = self._users.get(user_id)
        if user is None or user.email_verification_token != code:
            return False
        stored = _copy(user)
        stored.mark_email_verified()
        self._users[user_id] = stored
        return True

    async def count(self) -> int:
        return len(self._users)

    def _find(self, predicate) -> User | None:
        for user in self._users.values():
            if predicate(user):
                return _copy(user)
        return None


class RecordingEmailService(EmailService):
    """EmailService that records messages instead of talking to SMTP."""

    def __init__(self, fail_verification: bool = False):
        self.welcome_emails: list[tuple[str, str | None]] = []
        self.verification_emails: list[tuple[str, str, str | None]] = []
        self._fail_verification = fail_verification

    def send_welcome_email(self, to_email: str, name: str | None = None) -> None:
        self.welcome_emails.append((to_email, name))

    def send_verification_code_email(
        self,
        to_email: str,
        code: str,
        name: str | None = None,
    ) -> None:
        if self._fail_verification:
            msg = "SMTP connection refused"
            raise ConnectionError(msg)
        self.verification_emails.append((to_email, code, name))

    def last_code_for(self, email: str) -> str:
        for to_email, code, _ in reversed(self.verification_emails):
            if to_email == email:
                return code
        msg = f"No verification email sent to {email}"
        raise AssertionError(msg)
