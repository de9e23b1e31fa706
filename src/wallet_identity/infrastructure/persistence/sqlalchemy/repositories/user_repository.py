"""SQLAlchemy implementation of UserRepository."""

import logging
from typing import Union
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from wallet_identity.domain.shared.time import utc_now
from wallet_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    User,
    UserRepository,
)
from wallet_identity.infrastructure.persistence.sqlalchemy.models import UserModel

logger = logging.getLogger(__name__)


class UserRepositorySQLAlchemy(UserRepository):
    """SQLAlchemy implementation of the UserRepository interface."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, user_id: UUID) -> User | None:
        model = await self._find_model_by_id(user_id)
        return self._map_to_domain(model) if model else None

    async def find_by_email(self, email: Union[str, Email]) -> User | None:
        email_value = email.value if isinstance(email, Email) else Email(email).value
        return await self._find_one(UserModel.email == email_value)

    async def find_by_google_id(self, google_id: str) -> User | None:
        return await self._find_one(UserModel.google_id == google_id)

    async def find_by_apple_id(self, apple_id: str) -> User | None:
        return await self._find_one(UserModel.apple_id == apple_id)

    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        user = await self.find_by_email(email)
        return user is not None

    async def save(self, user: User) -> None:
        existing = await self._find_model_by_id(user.id)

        try:
            if existing:
                self._update_model(existing, user)
                logger.debug("Updated user: %s", user.id)
            else:
                self._session.add(self._map_to_model(user))
                logger.info("Created user: %s (email: %s)", user.id, user.email)

            await self._session.flush()
        except IntegrityError as e:
            if "unique" in str(e).lower():
                raise EmailAlreadyExistsError(user.email) from e
            raise

    async def consume_verification_code(self, user_id: UUID, code: str) -> bool:
        stmt = (
            update(UserModel)
            .where(
                UserModel.id == user_id,
                UserModel.email_verification_token.is_not(None),
                UserModel.email_verification_token == code,
            )
            .values(
                is_email_verified=True,
                email_verification_token=None,
                email_verification_token_expires_at=None,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session="fetch")
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        consumed = result.rowcount == 1  # type: ignore[attr-defined]
        if not consumed:
            logger.info("Verification code for user %s was already consumed", user_id)
        return consumed

    async def count(self) -> int:
        stmt = select(func.count()).select_from(UserModel)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def _find_one(self, *criteria) -> User | None:
        stmt = select(UserModel).where(*criteria)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._map_to_domain(model) if model else None

    async def _find_model_by_id(self, user_id: UUID) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _map_to_domain(self, model: UserModel) -> User:
        return User.reconstitute(
            id=model.id,
            email=model.email,
            first_name=model.first_name,
            last_name=model.last_name,
            role=model.role,
            password_hash=model.password_hash,
            google_id=model.google_id,
            apple_id=model.apple_id,
            picture=model.picture,
            is_active=model.is_active,
            is_email_verified=model.is_email_verified,
            email_verification_token=model.email_verification_token,
            email_verification_token_expires_at=model.email_verification_token_expires_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _map_to_model(self, user: User) -> UserModel:
        model = UserModel(id=user.id, created_at=user.created_at)
        self._update_model(model, user)
        return model

    def _update_model(self, model: UserModel, user: User) -> None:
        model.email = user.email
        model.first_name = user.first_name
        model.last_name = user.last_name
        model.picture = user.picture
        model.role = user.role.value
        model.password_hash = user.password_hash
        model.google_id = user.google_id
        model.apple_id = user.apple_id
        model.is_active = user.is_active
        model.is_email_verified = user.is_email_verified
        model.email_verification_token = user.email_verification_token
        model.email_verification_token_expires_at = (
            user.email_verification_token_expires_at
        )
        model.updated_at = user.updated_at
