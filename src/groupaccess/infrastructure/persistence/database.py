"""Database engine and sessions (SQLAlchemy 2.0 async).

SQLite through aiosqlite is the default; any async driver SQLAlchemy
supports (e.g. asyncpg) works by changing GROUPACCESS_DATABASE_URL.
Repositories only flush, so whoever opens a session commits it.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from groupaccess.core.config import Settings, get_settings
from groupaccess.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Declarative base of the group access tables."""


class DatabaseManager:
    """Lazily created engine and session factory for one database URL."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_sqlite(self) -> bool:
        return self.settings.database_url.startswith("sqlite")

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_async_engine(
                self.settings.database_url,
                echo=self.settings.db_echo,
                connect_args={"check_same_thread": False} if self.is_sqlite else {},
            )
            logger.info(
                "Database engine created",
                database_url=self._engine.url.render_as_string(hide_password=True),
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Open a session, rolling back if the block raises.

        Example:
            async with db.session() as session:
                service = await GroupAccessService.create(session)
                await service.registry.add_group("node", "club")
                await session.commit()
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def create_tables(self) -> None:
        """Create missing tables. Migrations are used outside development."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    async def check_connection(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.error("Database connection check failed", error=str(e))
            return False
        return True

    async def disconnect(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.debug("Database engine disposed")


_db_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    """Process-wide database manager built from the current settings."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


async def init_database() -> None:
    """Make sure the database is reachable and, outside production, create the tables.

    Raises:
        RuntimeError: If the database cannot be reached.
    """
    from groupaccess.infrastructure.persistence import models  # noqa: F401

    db = get_db_manager()

    if db.is_sqlite:
        db_path = db.settings.database_url.split(":///")[-1]
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    if not await db.check_connection():
        raise RuntimeError("Failed to connect to database")

    if db.settings.is_production:
        logger.info("Production mode: skipping table creation, use migrations")
        return
    await db.create_tables()


async def close_database() -> None:
    await get_db_manager().disconnect()
