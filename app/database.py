"""
Engine, session factory and declarative base.
Runs on PostgreSQL through asyncpg in deployment and on SQLite through aiosqlite locally and in tests.
"""

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import text, DateTime, Integer, func
from app.config import settings
import logging
from datetime import datetime
from typing import Any, AsyncGenerator, Dict

logger = logging.getLogger(__name__)


def _engine_options() -> Dict[str, Any]:
    """Pool tuning for PostgreSQL; SQLite only needs cross-thread access."""
    if settings.is_sqlite:
        return {"connect_args": {"check_same_thread": False}}

    return {
        "pool_size": 10,
        "max_overflow": 20,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "pool_timeout": 30,
        "connect_args": {"server_settings": {"application_name": "rental_listing_api"}},
    }


engine = create_async_engine(settings.database_url, echo=settings.debug, **_engine_options())

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    """
    Declarative base for every table.

    Each table gets an integer primary key and server-side creation and
    modification timestamps.
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request, rolled back if the handler raises."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def check_database_connection() -> bool:
    """Run ``SELECT 1``; False means the database is unreachable."""
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False

    logger.debug("Database connection successful")
    return True


async def create_tables():
    """Create any missing tables for the registered models."""
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")


async def drop_tables():
    """
    Drop every table.

    Raises:
        RuntimeError: When running in production
    """
    if settings.is_production:
        raise RuntimeError("Cannot drop tables in production environment")

    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("Database tables dropped")


async def close_db_connection():
    await engine.dispose()
    logger.info("Database connections closed")
