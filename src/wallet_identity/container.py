"""Wiring for the identity services.

``IdentityContainer`` is built once at process start from an immutable
``AuthConfig``. It holds the stateless services (hashing, tokens, codes,
provider adapters) and assembles a request-scoped ``AuthenticationService``
around a database session.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from wallet_identity.application.notifications import NotificationDispatcher
from wallet_identity.application.services import (
    AuthenticationService,
    OAuthAccountLinker,
)
from wallet_identity.exceptions import EmailDeliveryFailedError
from wallet_identity.infrastructure.oauth import (
    AppleIdentityVerifier,
    GoogleOAuthClient,
)
from wallet_identity.infrastructure.persistence.sqlalchemy import (
    UserRepositorySQLAlchemy,
)
from wallet_identity.services import (
    JWTService,
    PasswordHashingService,
    VerificationCodeGenerator,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from wallet_identity.config import AuthConfig
    from wallet_identity.infrastructure.email import EmailService

logger = logging.getLogger(__name__)


class IdentityContainer:
    def __init__(self, config: AuthConfig, email_service: EmailService):
        self._config = config
        self._email_service = email_service

        self.password_service = PasswordHashingService(rounds=config.bcrypt_rounds)
        self.jwt_service = JWTService(
            secret_key=config.jwt_secret_key,
            access_token_expire_minutes=config.access_token_expire_minutes,
            refresh_token_expire_days=config.refresh_token_expire_days,
        )
        self.code_generator = VerificationCodeGenerator(
            ttl_minutes=config.verification_code_ttl_minutes,
        )
        self.google_client = self._create_google_client(config)
        self.apple_verifier = self._create_apple_verifier(config)

    # -------------------------------------------------------------------------
    # Provider adapters
    # -------------------------------------------------------------------------

    @staticmethod
    def _create_google_client(config: AuthConfig) -> GoogleOAuthClient | None:
        if not config.google_client_id:
            logger.info("Google sign in disabled: no client id configured")
            return None
        return GoogleOAuthClient(
            client_id=config.google_client_id,
            client_secret=config.google_client_secret,
            timeout=config.oauth_timeout,
        )

    @staticmethod
    def _create_apple_verifier(config: AuthConfig) -> AppleIdentityVerifier | None:
        if not config.apple_client_id:
            logger.info("Apple sign in disabled: no client id configured")
            return None
        return AppleIdentityVerifier(
            client_id=config.apple_client_id,
            timeout=config.oauth_timeout,
        )

    # -------------------------------------------------------------------------
    # Request-scoped services
    # -------------------------------------------------------------------------

    def create_authentication_service(
        self,
        session: AsyncSession,
        notifications: NotificationDispatcher,
    ) -> AuthenticationService:
        """
        Build the service for one session.

        The caller owns ``notifications`` and must ``release()`` it after
        committing, or queued welcome emails are never sent.
        """
        user_repo = UserRepositorySQLAlchemy(session)

        return AuthenticationService(
            user_repository=user_repo,
            password_service=self.password_service,
            jwt_service=self.jwt_service,
            code_generator=self.code_generator,
            notifications=notifications,
            oauth_linker=OAuthAccountLinker(user_repo, notifications),
            google_client=self.google_client,
            apple_verifier=self.apple_verifier,
        )

    @asynccontextmanager
    async def authentication_scope(
        self,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> AsyncIterator[AuthenticationService]:
        """
        Run one authentication flow as a unit of work.

        On success the session is committed and queued welcome emails are
        released. A failed verification email still commits, so the new
        code stays stored. Any other error rolls back and drops the queue.
        """
        notifications = NotificationDispatcher(self._email_service)
        async with session_factory() as session:
            service = self.create_authentication_service(session, notifications)
            try:
                yield service
            except EmailDeliveryFailedError:
                await session.commit()
                notifications.discard()
                raise
            except BaseException:
                await session.rollback()
                notifications.discard()
                raise
            await session.commit()
            notifications.release()
