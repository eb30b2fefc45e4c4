"""
Database dependencies.
"""

from typing import AsyncGenerator

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from pos_auth.models.database import async_session_factory

logger = structlog.get_logger()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    One session per request.

    The transaction commits when the route returns and rolls back when it
    raises, including classified service errors.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception as exc:
            await session.rollback()
            logger.debug("request_transaction_rolled_back", error_type=type(exc).__name__)
            raise
