"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional, Union
from uuid import UUID

from wallet_identity.domain.user.aggregates.user import User
from wallet_identity.domain.user.value_objects.email import Email


class UserRepository(ABC):
    """Repository interface for User aggregates."""

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        """Find a user by their ID."""

    @abstractmethod
    async def find_by_email(self, email: Union[str, Email]) -> Optional[User]:
        """Find a user by their (normalized) email address."""

    @abstractmethod
    async def find_by_google_id(self, google_id: str) -> Optional[User]:
        """Find a user by their Google subject id."""

    @abstractmethod
    async def find_by_apple_id(self, apple_id: str) -> Optional[User]:
        """Find a user by their Apple subject id."""

    @abstractmethod
    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        """Check if a user exists with the given email."""

    @abstractmethod
    async def save(self, user: User) -> None:
        """Save or update a user."""

    @abstractmethod
    async def consume_verification_code(self, user_id: UUID, code: str) -> bool:
        """Mark the email verified if ``code`` is still the stored code.

        Clears the code and its expiry in the same statement. Returns False
        when the stored code no longer matches (already consumed or
        replaced), so only one caller can consume a code.
        """

    @abstractmethod
    async def count(self) -> int:
        """Count total users."""
