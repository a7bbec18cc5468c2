"""
Database engine, session factory and FastAPI session dependency.
"""
import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from carrental.config import get_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


@lru_cache()
def get_engine() -> AsyncEngine:
    """Create the application engine on first use."""
    settings = get_settings()
    return create_async_engine(settings.database_url, echo=settings.debug)


@lru_cache()
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(get_engine(), expire_on_commit=False)


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Yield one session per request.
    Uncommitted work is rolled back when the request ends.
    """
    async with get_session_factory()() as session:
        yield session


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables and seed reference data."""
    # Import models so that they register on Base.metadata
    from carrental import models  # noqa: F401
    from carrental.seed import seed_roles

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        await seed_roles(session)


async def init_db() -> None:
    """Initialise the application database."""
    logger.info("Initialising database schema")
    await create_schema(get_engine())


async def close_db() -> None:
    await get_engine().dispose()
