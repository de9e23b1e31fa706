"""Email verification code generation."""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from wallet_identity.domain.shared.time import ensure_tz_aware, utc_now


@dataclass(frozen=True)
class VerificationCode:
    code: str
    expires_at: datetime


class VerificationCodeGenerator:
    """Produces short-lived six digit codes proving mailbox ownership.

    Codes are drawn uniformly from 100000-999999 using the ``secrets``
    module, whose ``randbelow`` rejects out-of-range draws instead of
    reducing modulo the range.
    """

    CODE_MIN = 100_000
    CODE_SPAN = 900_000
    DEFAULT_TTL_MINUTES = 15

    def __init__(
        self,
        ttl_minutes: int = DEFAULT_TTL_MINUTES,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._ttl = timedelta(minutes=ttl_minutes)
        self._clock = clock

    def generate(self) -> VerificationCode:
        code = str(self.CODE_MIN + secrets.randbelow(self.CODE_SPAN))
        return VerificationCode(code=code, expires_at=self._clock() + self._ttl)

    def is_expired(self, expires_at: datetime) -> bool:
        return self._clock() > ensure_tz_aware(expires_at)

    @staticmethod
    def matches(expected: str, candidate: str) -> bool:
        """Compare codes in constant time."""
        return secrets.compare_digest(
            expected.encode("utf-8"),
            candidate.strip().encode("utf-8"),
        )
