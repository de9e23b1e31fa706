"""
Fixtures for end-to-end authentication flows.

The flows run against real hashing, token and code services. Storage is
the in-memory repository and mail is recorded instead of sent.
"""

from datetime import datetime, timezone

import pytest

from tests.shared.fakes import InMemoryUserRepository, RecordingEmailService
from wallet_identity.application.notifications import NotificationDispatcher
from wallet_identity.application.services import (
    AuthenticationService,
    OAuthAccountLinker,
)
from wallet_identity.services import (
    JWTService,
    PasswordHashingService,
    VerificationCodeGenerator,
)

START = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def mailer() -> RecordingEmailService:
    return RecordingEmailService()


@pytest.fixture
def jwt_service() -> JWTService:
    return JWTService(secret_key="e2e-secret-key")


@pytest.fixture
def password_service() -> PasswordHashingService:
    return PasswordHashingService(rounds=4)


@pytest.fixture
def notifications(mailer) -> NotificationDispatcher:
    return NotificationDispatcher(mailer)


@pytest.fixture
def auth_service(
    user_repo,
    password_service,
    jwt_service,
    clock,
    notifications,
) -> AuthenticationService:
    return AuthenticationService(
        user_repository=user_repo,
        password_service=password_service,
        jwt_service=jwt_service,
        code_generator=VerificationCodeGenerator(ttl_minutes=15, clock=clock),
        notifications=notifications,
        oauth_linker=OAuthAccountLinker(user_repo, notifications),
    )
