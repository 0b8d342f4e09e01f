# lockbox/app/db/session.py
"""
Async database session management for SQLAlchemy.

- Uses aiosqlite for SQLite (local default)
- Uses asyncpg for PostgreSQL when DATABASE_URL points there
- Pool settings differ for SQLite (no pooling) vs PostgreSQL
"""
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, AsyncAdaptedQueuePool

from lockbox.app.core.config import settings


def _create_async_engine() -> AsyncEngine:
    """
    Create and configure the async SQLAlchemy engine.

    SQLite:
    - NullPool (new connection per checkout)
    - check_same_thread=False for async compatibility

    PostgreSQL:
    - AsyncAdaptedQueuePool with pre-ping and periodic recycle

    Returns:
        Configured AsyncEngine instance
    """
    if settings.is_sqlite:
        return create_async_engine(
            settings.DATABASE_URL,
            echo=settings.DATABASE_ECHO,
            poolclass=NullPool,
            connect_args={"check_same_thread": False},
        )

    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DATABASE_ECHO,
        poolclass=AsyncAdaptedQueuePool,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        pool_recycle=300,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Global async engine instance
# Created once at module load, reused across all requests
# ─────────────────────────────────────────────────────────────────────────────
engine: AsyncEngine = _create_async_engine()


# ─────────────────────────────────────────────────────────────────────────────
# Async session factory
#
# expire_on_commit=False: attributes stay readable after commit
# autoflush=False: explicit flush control
# ─────────────────────────────────────────────────────────────────────────────
AsyncSessionLocal: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Usage in FastAPI endpoints:
        @router.get("/lockboxes")
        async def list_lockboxes(db: AsyncSession = Depends(get_db)):
            ...

    Note: This does NOT auto-commit. Endpoints must explicitly commit.

    Yields:
        AsyncSession bound to the configured database
    """
    async with AsyncSessionLocal() as session:
        yield session
