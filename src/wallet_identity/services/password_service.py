"""Password hashing service using bcrypt.

Provides secure password hashing and verification with
strength validation.
"""

from functools import lru_cache

import bcrypt

from wallet_identity.exceptions import WeakPasswordError

_DUMMY_PASSWORD = b"wallet-identity-dummy-password"


@lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> bytes:
    return bcrypt.hashpw(_DUMMY_PASSWORD, bcrypt.gensalt(rounds=rounds))


class PasswordHashingService:
    """Service for secure password hashing and verification.

    Uses bcrypt for password hashing with configurable work factor.
    Also provides password strength validation.

    Examples
    --------
    >>> service = PasswordHashingService()
    >>> hash = service.hash("my_secure_password")
    >>> service.verify("my_secure_password", hash)
    True
    >>> service.verify("wrong_password", hash)
    False
    """

    MIN_LENGTH = 8
    # bcrypt only looks at the first 72 bytes of the input
    MAX_BYTES = 72

    def __init__(self, rounds: int = 12):
        """Initialize the password hashing service.

        Parameters
        ----------
        rounds
            The bcrypt work factor (log2 of iterations). Default is 12,
            which is a good balance of security and performance.
        """
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a plaintext password.

        Parameters
        ----------
        password
            The plaintext password to hash

        Returns
        -------
        The bcrypt hash as a string

        Raises
        ------
        WeakPasswordError
            If password doesn't meet requirements
        """
        self.validate_strength(password)
        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str | None) -> bool:
        """Verify a password against a hash.

        Never raises. When there is no hash (unknown user or an OAuth-only
        account) or bcrypt rejects the input (malformed hash, password over
        72 bytes) a check against a dummy hash still runs, so the call takes
        about as long as a real mismatch.

        Parameters
        ----------
        password
            The plaintext password to check
        password_hash
            The bcrypt hash to verify against, or None

        Returns
        -------
        True if password matches, False otherwise
        """
        if not password_hash:
            self._burn_time(password)
            return False
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except (ValueError, TypeError):
            # Invalid hash format or over-long password
            self._burn_time(password)
            return False

    def needs_rehash(self, password_hash: str) -> bool:
        """Check whether a hash was created with a different work factor.

        Hashes look like ``$2b$12$<salt+digest>``; the second field is the
        cost. Unparseable hashes are reported as needing a rehash.
        """
        parts = password_hash.split("$")
        if len(parts) < 4 or not parts[2].isdigit():
            return True
        return int(parts[2]) != self._rounds

    def validate_strength(self, password: str) -> None:
        """Validate that a password meets strength requirements.

        Current requirements:
        - Minimum 8 characters
        - Maximum 72 bytes (UTF-8)

        Raises
        ------
        WeakPasswordError
            If password doesn't meet requirements
        """
        if not password:
            msg = "Password cannot be empty"
            raise WeakPasswordError(msg)

        if len(password) < self.MIN_LENGTH:
            msg = f"Password must be at least {self.MIN_LENGTH} characters"
            raise WeakPasswordError(msg)

        if len(password.encode("utf-8")) > self.MAX_BYTES:
            msg = f"Password cannot exceed {self.MAX_BYTES} bytes"
            raise WeakPasswordError(msg)

    def _burn_time(self, password: str) -> None:
        try:
            bcrypt.checkpw(
                password.encode("utf-8")[: self.MAX_BYTES],
                _dummy_hash(self._rounds),
            )
        except (ValueError, TypeError):
            pass
