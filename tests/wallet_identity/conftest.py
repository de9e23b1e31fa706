"""
Pytest configuration for wallet_identity domain tests.

This conftest provides fixtures specific to the wallet_identity domain
(users, authentication, authorization).
"""

import pytest

from wallet_identity.config import AuthConfig
from wallet_identity.domain.user import OAuthProvider, User, UserRole

TEST_SECRET = "test-secret-key-12345"


@pytest.fixture
def auth_config() -> AuthConfig:
    """Auth configuration with a low bcrypt cost for fast tests."""
    return AuthConfig(jwt_secret_key=TEST_SECRET, bcrypt_rounds=4)


@pytest.fixture
def test_user() -> User:
    """Create a standard, unverified test user."""
    return User.create("test@example.com", first_name="Test", last_name="User")


@pytest.fixture
def verified_user() -> User:
    """Create a user whose email is already verified."""
    user = User.create("verified@example.com", first_name="Vera", last_name="Fied")
    user.mark_email_verified()
    return user


@pytest.fixture
def google_user() -> User:
    """Create a user that signed up through Google."""
    return User.create_from_oauth(
        email="google@example.com",
        first_name="Gina",
        last_name="Oogle",
        provider=OAuthProvider.GOOGLE,
        provider_id="google-sub-1",
    )


@pytest.fixture
def admin_user() -> User:
    """Create an admin test user."""
    user = User.create("admin@example.com", first_name="Ada", last_name="Min")
    user.promote_to_admin()
    return user


@pytest.fixture
def user_role() -> UserRole:
    """Standard user role."""
    return UserRole.USER


@pytest.fixture
def admin_role() -> UserRole:
    """Admin user role."""
    return UserRole.ADMIN
