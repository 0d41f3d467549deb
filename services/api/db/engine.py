"""
AsyncEngine factory for the preference database.

NullPool because PgBouncer owns connection pooling — SA should not
maintain its own pool on top.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine; plain postgresql:// URLs are switched to asyncpg."""
    url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return create_async_engine(url, poolclass=NullPool, echo=echo)
