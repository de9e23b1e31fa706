"""Engine, session and schema helpers for the identity database."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

# Import models to register them with IdentityBase.metadata
import wallet_identity.infrastructure.persistence.sqlalchemy.models  # noqa: F401
from wallet_config.settings import Settings
from wallet_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase

logger = logging.getLogger(__name__)


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    return create_async_engine(
        settings.database_url,
        echo=False,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Yield a session that commits on success and rolls back on error."""
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except BaseException:
            await session.rollback()
            raise


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all identity tables (idempotent).

    Uses SQLAlchemy's create_all() which only creates missing tables.
    """
    logger.info("Ensuring identity tables exist...")
    async with engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.create_all)
    logger.info("Identity schema is up to date")


async def drop_tables(engine: AsyncEngine) -> None:
    """Drop all identity tables (USE WITH CAUTION!)."""
    logger.warning("Dropping all identity tables...")
    async with engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.drop_all)
