"""Shared fixtures.

Unit tests need no database. Tests that take ``session_factory`` run against
the PostgreSQL in DATABASE_URL and are skipped when it is not set.
Example: export DATABASE_URL="postgresql+asyncpg://crm:<password>@localhost:5432/crm_test"
"""
import os
import uuid

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from db.models import Base


@pytest_asyncio.fixture
async def session_factory():
    """Session factory on a throwaway engine bound to this test's event loop."""
    url = os.environ.get("DATABASE_URL")
    if not url:
        pytest.skip("DATABASE_URL not set; skipping PostgreSQL integration test")
    engine = create_async_engine(url, poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.exec_driver_sql("CREATE SCHEMA IF NOT EXISTS crm")
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    finally:
        await engine.dispose()


@pytest.fixture
def unique():
    """Short random token so tests never collide on names or URLs."""
    return uuid.uuid4().hex[:10]
