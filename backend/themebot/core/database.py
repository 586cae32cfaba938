"""
Database configuration: async engine and session factory.
Works with the default SQLite file (aiosqlite) and with PostgreSQL (asyncpg),
including transaction poolers.
"""
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from themebot.models import Base


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine for `url`. Pool sizing only applies to server databases."""
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=echo)

    # Transaction pooler (e.g. port 6543 / pgbouncer) does not support prepared statements.
    # Use NullPool + statement_cache_size=0 so asyncpg does not cache prepared statements.
    if ":6543/" in url:
        return create_async_engine(
            url,
            echo=echo,
            connect_args={"statement_cache_size": 0},
            poolclass=NullPool,
        )
    return create_async_engine(
        url,
        echo=echo,
        pool_size=5,
        max_overflow=10,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create the `themes` table if it does not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
