"""Identity services - JWT, password hashing and verification codes."""

from wallet_identity.services.jwt_service import JWTService
from wallet_identity.services.password_service import PasswordHashingService
from wallet_identity.services.verification_code_service import (
    VerificationCode,
    VerificationCodeGenerator,
)

__all__ = [
    "JWTService",
    "PasswordHashingService",
    "VerificationCode",
    "VerificationCodeGenerator",
]
