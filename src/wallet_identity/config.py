"""Immutable authentication configuration.

Built once at process start from the application settings and handed to
the services that need it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wallet_config import Settings


@dataclass(frozen=True)
class AuthConfig:
    jwt_secret_key: str
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 7
    bcrypt_rounds: int = 12
    verification_code_ttl_minutes: int = 15
    google_client_id: str = ""
    google_client_secret: str = ""
    apple_client_id: str = ""
    oauth_timeout: float = 10.0

    @classmethod
    def from_settings(cls, settings: Settings) -> AuthConfig:
        google_secret = (
            settings.google_client_secret.get_secret_value()
            if settings.google_client_secret
            else ""
        )
        return cls(
            jwt_secret_key=settings.jwt_secret_key.get_secret_value(),
            access_token_expire_minutes=settings.jwt_access_token_expire_minutes,
            refresh_token_expire_days=settings.jwt_refresh_token_expire_days,
            bcrypt_rounds=settings.bcrypt_rounds,
            verification_code_ttl_minutes=settings.verification_code_ttl_minutes,
            google_client_id=settings.google_client_id,
            google_client_secret=google_secret,
            apple_client_id=settings.apple_client_id,
            oauth_timeout=settings.oauth_timeout,
        )

    def __repr__(self) -> str:
        return (
            f"AuthConfig(access_token_expire_minutes={self.access_token_expire_minutes}, "
            f"refresh_token_expire_days={self.refresh_token_expire_days}, "
            f"bcrypt_rounds={self.bcrypt_rounds})"
        )
