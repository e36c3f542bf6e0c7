"""
Database session configuration.

The pricing service only reads the rule tables; sessions are opened per
request and never committed.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from delivery_pricing.app.core.config import settings

engine = create_async_engine(
    settings.database_url,
    echo=settings.db_echo,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=True,
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Declarative base shared by the rule table models
Base = declarative_base()


async def get_db():
    """
    FastAPI dependency yielding a read session for the rule tables.

    Any transaction left open by the pricing lookups is rolled back
    when the session closes.
    """
    async with AsyncSessionLocal() as session:
        yield session
