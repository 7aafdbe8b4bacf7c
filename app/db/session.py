"""
Database session and engine configuration.

The engine is async SQLAlchemy: asyncpg against PostgreSQL in deployment,
aiosqlite for local runs and tests.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for the given URL."""
    return create_async_engine(database_url, echo=echo, future=True)


def build_session_maker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Job rows are read after commits for progress reporting, keep them loaded
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)
async_session_maker = build_session_maker(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a request-scoped session.

    Commits when the handler returns normally and rolls back on errors.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

