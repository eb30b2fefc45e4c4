"""
Database engine and session factory.

The engine is built once per process from ``DB_*`` settings. SQLite URLs
(local runs) skip the connection pool options that only apply to
server databases.
"""

import structlog
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)

from pos_auth.core.config import DatabaseSettings, settings

logger = structlog.get_logger()


def build_engine(db: DatabaseSettings) -> AsyncEngine:
    """Create the async engine for the configured database."""
    url = make_url(db.url)
    if url.get_backend_name() == "sqlite":
        return create_async_engine(url, echo=db.echo)

    return create_async_engine(
        url,
        echo=db.echo,
        pool_size=db.pool_size,
        max_overflow=db.pool_overflow,
        pool_timeout=db.pool_timeout,
        pool_pre_ping=True,
    )


engine = build_engine(settings.database)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db() -> None:
    """Create any missing tables for the identity store."""
    from . import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("database_ready", tables=sorted(Base.metadata.tables))


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()
