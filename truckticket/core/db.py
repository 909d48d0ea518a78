import logging
from collections.abc import AsyncGenerator
from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from truckticket.core.config import Settings, get_settings
from truckticket.models.base import Base

logger = logging.getLogger(__name__)

settings = get_settings()


def get_async_database_url(url: str) -> str:
    """Convert database URL to async-compatible format using psycopg driver."""
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)
    elif url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg://", 1)
    elif url.startswith("sqlite://"):
        url = url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


def engine_options(url: str, config: Settings) -> Dict[str, Any]:
    """Pool options for server databases; SQLite picks its own pool."""
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_pre_ping": True,  # Verify connections before using
        "pool_recycle": 3600,
        "pool_size": config.db_pool_size,
        "pool_timeout": config.db_pool_timeout,
        "max_overflow": config.db_max_overflow,
        "connect_args": {"connect_timeout": config.db_connect_timeout},
    }


database_url = get_async_database_url(settings.database_url)

engine: AsyncEngine = create_async_engine(
    database_url,
    echo=settings.debug,
    **engine_options(database_url, settings),
)

AsyncSessionFactory = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionFactory() as session:
        yield session


async def init_database() -> None:
    """Create all tables. In production use Alembic migrations instead."""
    logger.info("[DB] Initializing database tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("[DB] Database tables initialized")


async def test_database_connection() -> bool:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        logger.error("[DB] Database connection test failed", exc_info=True)
        return False
    return True
