"""
Database configuration and session management.

This module contains SQLAlchemy engine, session configuration,
and database table creation utilities.
"""

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from floodwatch.config import settings

database_url = settings.SQLALCHEMY_DATABASE_URI
if database_url.startswith("postgresql://"):
    database_url = database_url.replace("postgresql://", "postgresql+asyncpg://")

engine = create_async_engine(
    database_url,
    echo=False,
    future=True,
    poolclass=StaticPool if database_url.startswith("sqlite") else None,
)

async_session = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Base class for all database models
Base = declarative_base()


async def get_db() -> AsyncSession:
    """
    Dependency function to get database session.

    Yields an async database session and ensures proper cleanup.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def create_tables():
    """
    Create all database tables.

    Used for SQLite deployments and tests; PostgreSQL deployments should
    run `alembic upgrade head` instead.
    """
    async with engine.begin() as conn:
        from floodwatch.models import snapshot  # noqa: F401
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables():
    """
    Drop all database tables.

    WARNING: This will delete all data. Use with caution.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
