"""JWT token service.

Provides JWT token creation and verification for authentication.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from wallet_identity.exceptions import InvalidTokenError
from wallet_identity.schemas import TokenPayload

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class JWTService:
    """Service for JWT token creation and verification.

    Handles access tokens (short-lived) and refresh tokens (long-lived).
    Tokens are stateless: they cannot be revoked server-side, callers
    re-check the account state after every successful verification.

    Examples
    --------
    >>> service = JWTService(secret_key="your-secret-key")
    >>> token = service.create_access_token(user_id, "user@example.com")
    >>> payload = service.verify_token(token)
    >>> print(payload.user_id)
    """

    DEFAULT_ACCESS_EXPIRE_MINUTES = 15
    DEFAULT_REFRESH_EXPIRE_DAYS = 7
    ALGORITHM = "HS256"

    def __init__(
        self,
        secret_key: str,
        access_token_expire_minutes: int = DEFAULT_ACCESS_EXPIRE_MINUTES,
        refresh_token_expire_days: int = DEFAULT_REFRESH_EXPIRE_DAYS,
    ):
        """Initialize the JWT service.

        Parameters
        ----------
        secret_key
            Secret key for signing tokens. Must be kept secure.
        access_token_expire_minutes
            Minutes until access token expires (default 15)
        refresh_token_expire_days
            Days until refresh token expires (default 7)
        """
        if not secret_key:
            msg = "JWT secret key cannot be empty"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._access_expire = timedelta(minutes=access_token_expire_minutes)
        self._refresh_expire = timedelta(days=refresh_token_expire_days)

    def create_access_token(
        self,
        user_id: UUID,
        email: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a short-lived access token."""
        return self._create_token(
            user_id=user_id,
            email=email,
            token_type=ACCESS_TOKEN_TYPE,
            expires_delta=expires_delta or self._access_expire,
        )

    def create_refresh_token(
        self,
        user_id: UUID,
        email: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a long-lived refresh token.

        Refresh tokens are only used to obtain a new access/refresh pair.
        """
        return self._create_token(
            user_id=user_id,
            email=email,
            token_type=REFRESH_TOKEN_TYPE,
            expires_delta=expires_delta or self._refresh_expire,
        )

    def verify_token(self, token: str) -> TokenPayload:
        """Verify and decode a JWT token.

        Expired, tampered, foreign-secret and malformed tokens all fail
        the same way.

        Raises
        ------
        InvalidTokenError
            If token is invalid, expired, or malformed
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                options={"require": ["sub", "exp", "type"]},
            )

            return TokenPayload(
                user_id=UUID(payload["sub"]),
                email=payload["email"],
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                token_type=payload["type"],
            )

        except (jwt.InvalidTokenError, KeyError, ValueError, TypeError) as e:
            raise InvalidTokenError from e

    def verify_access_token(self, token: str) -> TokenPayload:
        return self._verify_typed(token, ACCESS_TOKEN_TYPE)

    def verify_refresh_token(self, token: str) -> TokenPayload:
        return self._verify_typed(token, REFRESH_TOKEN_TYPE)

    def _verify_typed(self, token: str, token_type: str) -> TokenPayload:
        payload = self.verify_token(token)
        if payload.token_type != token_type:
            raise InvalidTokenError
        return payload

    def _create_token(
        self,
        user_id: UUID,
        email: str,
        token_type: str,
        expires_delta: timedelta,
    ) -> str:
        now = datetime.now(tz=timezone.utc)

        payload = {
            "sub": str(user_id),
            "email": email,
            "type": token_type,
            "iat": now,
            "exp": now + expires_delta,
        }

        return jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)
