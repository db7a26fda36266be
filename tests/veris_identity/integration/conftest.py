"""
Pytest configuration for veris_identity integration tests.

Integration tests run the SQLAlchemy stores against a file-backed SQLite
database (aiosqlite), created fresh for every test.
"""

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from veris_identity.infrastructure.persistence.sqlalchemy import IdentityBase


@pytest_asyncio.fixture(scope="function")
async def async_engine(tmp_path):
    """Engine bound to a throwaway SQLite file."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'identity.db'}")
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(async_engine):
    """
    Provide an isolated database session for each test.

    Tables are created before the test and dropped afterwards; uncommitted
    changes are rolled back.
    """
    async with async_engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.create_all)

    session_maker = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_maker() as session:
        yield session
        await session.rollback()

    async with async_engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.drop_all)
