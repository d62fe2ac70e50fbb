"""Pytest configuration for all tests."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from groupaccess.core.config import Settings, get_settings
from groupaccess.core.context import clear_current_account
from groupaccess.core.hooks import HookRegistry
from groupaccess.infrastructure.persistence import models  # noqa: F401
from groupaccess.infrastructure.persistence.database import Base


@pytest.fixture
def settings() -> Settings:
    """Settings used by the services under test."""
    return Settings(
        environment="testing",
        database_url="sqlite+aiosqlite:///:memory:",
        superuser_id="1",
        group_manager_full_access=False,
    )


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reset cached settings and the current account around every test."""
    get_settings.cache_clear()
    clear_current_account()
    yield
    get_settings.cache_clear()
    clear_current_account()


@pytest.fixture
def hook_registry() -> HookRegistry:
    return HookRegistry()


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def group_access(db_session, hook_registry, settings):
    """Group access services bound to the test session."""
    from groupaccess.application.services import GroupAccessService
    from groupaccess.infrastructure.auth import SessionIdentityProvider

    return await GroupAccessService.create(
        db_session,
        hook_registry=hook_registry,
        identity_provider=SessionIdentityProvider(settings.superuser_id),
        settings=settings,
    )
