"""Authentication service for signup, login and email verification."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING
from uuid import UUID

from wallet_identity.application.context import UserContext
from wallet_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    User,
    UserNotFoundError,
)
from wallet_identity.exceptions import (
    AccountDeactivatedError,
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
from wallet_identity.infrastructure.oauth import profile_from_apple_claims
from wallet_identity.schemas import (
    AuthOutcome,
    AuthResult,
    OAuthProfile,
    PublicUser,
    VerificationEmailSent,
    VerificationRequired,
)

if TYPE_CHECKING:
    from wallet_identity.application.notifications import NotificationDispatcher
    from wallet_identity.application.services.oauth_account_linker import (
        OAuthAccountLinker,
    )
    from wallet_identity.domain.user import UserRepository
    from wallet_identity.infrastructure.oauth import (
        AppleIdentityVerifier,
        GoogleOAuthClient,
    )
    from wallet_identity.services import (
        JWTService,
        PasswordHashingService,
        VerificationCodeGenerator,
    )

logger = logging.getLogger(__name__)


class AuthenticationService:
    """
    Application service for user authentication.

    Orchestrates password hashing, token issuance, verification codes and
    OAuth account linking around the User aggregate:
    - Signup with email and password
    - Login (tokens, or a request to verify the email first)
    - Token refresh
    - Email verification with a six digit code
    - Sign in through Google or Apple
    - Password change

    Every flow performs at most one row mutation. Committing is left to
    the caller's unit of work (see ``wallet_identity.container``).
    """

    def __init__(  # noqa: PLR0913
        self,
        user_repository: UserRepository,
        password_service: PasswordHashingService,
        jwt_service: JWTService,
        code_generator: VerificationCodeGenerator,
        notifications: NotificationDispatcher,
        oauth_linker: OAuthAccountLinker,
        google_client: GoogleOAuthClient | None = None,
        apple_verifier: AppleIdentityVerifier | None = None,
    ):
        self._user_repo = user_repository
        self._password_service = password_service
        self._jwt_service = jwt_service
        self._code_generator = code_generator
        self._notifications = notifications
        self._oauth_linker = oauth_linker
        self._google_client = google_client
        self._apple_verifier = apple_verifier

    def _issue(self, user: User) -> AuthResult:
        access_token = self._jwt_service.create_access_token(
            user_id=user.id,
            email=user.email,
        )
        refresh_token = self._jwt_service.create_refresh_token(
            user_id=user.id,
            email=user.email,
        )
        return AuthResult(
            access_token=access_token,
            refresh_token=refresh_token,
            user=PublicUser.model_validate(user),
        )

    async def _upgrade_password_hash(self, user: User, password: str) -> None:
        try:
            new_hash = await asyncio.to_thread(self._password_service.hash, password)
        except WeakPasswordError:
            # Passwords from before the current policy keep their old hash
            return
        user.change_password_hash(new_hash)
        await self._user_repo.save(user)
        logger.info("Password hash upgraded for user: %s", user.email)

    async def signup(  # noqa: PLR0913
        self,
        email: str,
        password: str,
        password_confirm: str,
        first_name: str,
        last_name: str,
        picture: str | None = None,
    ) -> VerificationRequired:
        if password != password_confirm:
            raise PasswordMismatchError

        email_obj = Email(email)
        if await self._user_repo.exists_by_email(email_obj):
            raise EmailAlreadyExistsError(email_obj.value)

        # bcrypt is CPU bound, keep it off the event loop
        password_hash = await asyncio.to_thread(self._password_service.hash, password)
        user = User.create(
            email=email_obj,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            password_hash=password_hash,
            picture=picture,
        )
        await self._user_repo.save(user)
        self._notifications.enqueue_welcome(user.email, user.first_name)

        logger.info("User signed up: %s", user.email)
        return VerificationRequired(
            email=user.email,
            message="Account created. Please verify your email to continue",
        )

    async def login(self, email: str, password: str) -> AuthOutcome:
        """
        Authenticate with email and password.

        Unknown emails and wrong passwords are indistinguishable: same
        exception, same message, and a bcrypt check runs in both cases.

        Returns
        -------
        ``AuthResult`` for a verified account, ``VerificationRequired`` when
        the email still has to be verified.
        """
        user = await self._user_repo.find_by_email(Email(email))
        password_hash = user.password_hash if user is not None else None

        password_ok = await asyncio.to_thread(
            self._password_service.verify,
            password,
            password_hash,
        )
        if user is None or not password_ok:
            logger.debug("Failed login attempt for %s", email)
            raise InvalidCredentialsError

        if not user.is_active:
            raise AccountDeactivatedError

        if self._password_service.needs_rehash(user.password_hash):
            await self._upgrade_password_hash(user, password)

        if not user.is_email_verified:
            logger.info("Login for unverified email: %s", user.email)
            return VerificationRequired(email=user.email)

        logger.info("User logged in: %s", user.email)
        return self._issue(user)

    async def refresh_token(self, refresh_token: str) -> AuthResult:
        """Issue a new token pair. The presented refresh token is not revoked."""
        payload = self._jwt_service.verify_refresh_token(refresh_token)

        user = await self._user_repo.find_by_id(payload.user_id)
        if user is None or not user.is_active:
            raise InvalidTokenError

        logger.debug("Tokens refreshed for user: %s", user.email)
        return self._issue(user)

    async def send_verification_email(self, email: str) -> VerificationEmailSent:
        email_obj = Email(email)
        user = await self._user_repo.find_by_email(email_obj)
        if user is None:
            raise UserNotFoundError(email_obj.value)
        if user.is_email_verified:
            raise EmailAlreadyVerifiedError

        code = self._code_generator.generate()
        user.set_verification_code(code.code, code.expires_at)
        await self._user_repo.save(user)

        try:
            await self._notifications.send_verification_code(
                user.email,
                code.code,
                user.first_name,
            )
        except Exception as e:
            logger.error("Failed to send verification email to %s: %s", user.email, e)
            raise EmailDeliveryFailedError from e

        logger.info("Verification code sent to %s", user.email)
        return VerificationEmailSent(email=user.email, expires_at=code.expires_at)

    async def verify_email(self, email: str, code: str) -> AuthResult:
        email_obj = Email(email)
        user = await self._user_repo.find_by_email(email_obj)
        if user is None:
            raise UserNotFoundError(email_obj.value)
        if not user.is_active:
            raise AccountDeactivatedError

        stored_code = user.email_verification_token
        expires_at = user.email_verification_token_expires_at
        if stored_code is None or expires_at is None:
            raise NoVerificationCodePendingError
        if self._code_generator.is_expired(expires_at):
            raise VerificationCodeExpiredError
        if not self._code_generator.matches(stored_code, code):
            raise InvalidVerificationCodeError

        # Only one concurrent request can clear a matching code
        if not await self._user_repo.consume_verification_code(user.id, stored_code):
            raise NoVerificationCodePendingError

        user.mark_email_verified()
        logger.info("Email verified: %s", user.email)
        return self._issue(user)

    async def oauth_login(self, profile: OAuthProfile) -> AuthResult:
        user = await self._oauth_linker.link(profile)
        if not user.is_active:
            raise AccountDeactivatedError

        logger.info(
            "User logged in via %s: %s",
            profile.provider.value,
            user.email,
        )
        return self._issue(user)

    async def google_login(
        self,
        code: str,
        redirect_uri: str,
        code_verifier: str,
    ) -> AuthResult:
        if self._google_client is None:
            raise ProviderExchangeFailedError(
                "google",
                "Google sign in is not configured",
            )

        access_token = await self._google_client.exchange_code(
            code=code,
            redirect_uri=redirect_uri,
            code_verifier=code_verifier,
        )
        google_profile = await self._google_client.fetch_profile(access_token)
        if not google_profile.verified_email:
            raise ProviderExchangeFailedError(
                "google",
                "Google account email is not verified",
            )
        return await self.oauth_login(google_profile.to_oauth_profile())

    async def apple_login(
        self,
        id_token: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> AuthResult:
        """
        Sign in with an Apple identity token.

        Apple only sends the user's name on the very first authorization,
        so the client may pass it alongside the token.
        """
        if self._apple_verifier is None:
            raise ProviderExchangeFailedError(
                "apple",
                "Apple sign in is not configured",
            )

        claims = await self._apple_verifier.verify(id_token)
        profile = profile_from_apple_claims(claims, first_name, last_name)
        return await self.oauth_login(profile)

    async def authenticate(self, access_token: str) -> UserContext:
        """Resolve an access token to the context of an active user."""
        payload = self._jwt_service.verify_access_token(access_token)

        user = await self._user_repo.find_by_id(payload.user_id)
        if user is None or not user.is_active:
            raise InvalidTokenError

        return UserContext.create(user)

    async def change_password(
        self,
        user_id: UUID,
        current_password: str,
        new_password: str,
        confirm_password: str,
    ) -> None:
        if new_password != confirm_password:
            msg = "New password and confirm password do not match"
            raise PasswordMismatchError(msg)

        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(str(user_id))

        current_ok = await asyncio.to_thread(
            self._password_service.verify,
            current_password,
            user.password_hash,
        )
        if not current_ok:
            msg = "Current password is incorrect"
            raise InvalidCredentialsError(msg)

        new_hash = await asyncio.to_thread(self._password_service.hash, new_password)
        user.change_password_hash(new_hash)
        await self._user_repo.save(user)

        logger.info("Password changed for user: %s", user_id)
