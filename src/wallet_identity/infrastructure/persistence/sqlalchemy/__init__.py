"""SQLAlchemy implementation for wallet_identity persistence.

Provides:
- IdentityBase: Declarative base for identity models
- UserModel: SQLAlchemy model for users
- UserRepositorySQLAlchemy: Repository implementation for users
- Engine/session helpers and schema creation
"""

from wallet_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase
from wallet_identity.infrastructure.persistence.sqlalchemy.database import (
    create_engine_from_settings,
    create_session_factory,
    create_tables,
    drop_tables,
    session_scope,
)
from wallet_identity.infrastructure.persistence.sqlalchemy.models import UserModel
from wallet_identity.infrastructure.persistence.sqlalchemy.repositories import (
    UserRepositorySQLAlchemy,
)

__all__ = [
    "IdentityBase",
    "UserModel",
    "UserRepositorySQLAlchemy",
    "create_engine_from_settings",
    "create_session_factory",
    "create_tables",
    "drop_tables",
    "session_scope",
]
