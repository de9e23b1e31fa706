"""Resolves provider-verified identities to local user accounts."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wallet_identity.domain.user import Email, OAuthProvider, User
from wallet_identity.exceptions import AccountDeactivatedError

if TYPE_CHECKING:
    from wallet_identity.application.notifications import NotificationDispatcher
    from wallet_identity.domain.user import UserRepository
    from wallet_identity.schemas import OAuthProfile

logger = logging.getLogger(__name__)

DEFAULT_LAST_NAME = "Wallet"


class OAuthAccountLinker:
    """
    Links an external identity to exactly one local user.

    Lookup order:
    1. the normalized email, so one person arriving through several
       providers under the same address keeps a single account;
    2. the provider subject id, for accounts whose email at the provider
       has changed since they were linked.

    Existing users only ever gain data (missing provider ids, missing
    picture). Verification and activity flags are never lowered.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        notifications: NotificationDispatcher,
    ):
        self._user_repo = user_repository
        self._notifications = notifications

    async def link(self, profile: OAuthProfile) -> User:
        email = Email(profile.email)
        user = await self._find_existing(email, profile)

        if user is None:
            return await self._create(email, profile)

        if not user.is_active:
            raise AccountDeactivatedError

        linked = False
        if await self._provider_id_available(user, profile):
            linked = user.link_oauth_identity(profile.provider, profile.provider_id)
        picture_added = user.backfill_picture(profile.picture)
        if linked or picture_added:
            await self._user_repo.save(user)
            logger.info(
                "Backfilled %s identity data for user %s",
                profile.provider.value,
                user.id,
            )
        return user

    async def _find_existing(self, email: Email, profile: OAuthProfile) -> User | None:
        user = await self._user_repo.find_by_email(email)
        if user is not None:
            return user
        return await self._find_by_provider_id(profile)

    async def _provider_id_available(self, user: User, profile: OAuthProfile) -> bool:
        """Whether the subject id can be stored on ``user``.

        An id bound to another account stays there; the email-matched user
        still signs in, just without the backfill.
        """
        if not profile.provider_id or user.provider_id(profile.provider):
            return False
        holder = await self._find_by_provider_id(profile)
        if holder is not None and holder.id != user.id:
            logger.warning(
                "Not linking %s id to user %s: already linked to user %s",
                profile.provider.value,
                user.id,
                holder.id,
            )
            return False
        return True

    async def _find_by_provider_id(self, profile: OAuthProfile) -> User | None:
        if not profile.provider_id:
            return None
        if profile.provider == OAuthProvider.GOOGLE:
            return await self._user_repo.find_by_google_id(profile.provider_id)
        if profile.provider == OAuthProvider.APPLE:
            return await self._user_repo.find_by_apple_id(profile.provider_id)
        return None

    async def _create(self, email: Email, profile: OAuthProfile) -> User:
        user = User.create_from_oauth(
            email=email,
            first_name=profile.first_name,
            last_name=profile.last_name or DEFAULT_LAST_NAME,
            provider=profile.provider,
            provider_id=profile.provider_id,
            picture=profile.picture,
        )
        await self._user_repo.save(user)
        self._notifications.enqueue_welcome(user.email, user.first_name)

        logger.info(
            "User created via %s sign in: %s",
            profile.provider.value,
            user.email,
        )
        return user
