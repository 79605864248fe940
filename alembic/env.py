"""
Alembic environment configuration.

This file contains the configuration for Alembic migrations,
including database connection and metadata setup.
"""

import sys
import os
from logging.config import fileConfig

from sqlalchemy import engine_from_config
from sqlalchemy import pool

from alembic import context

# Add the parent directory to the path so we can import the floodwatch package
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from floodwatch.config import settings
from floodwatch.database import Base

# Import all models to ensure they are registered with Base.metadata
import floodwatch.models  # noqa: F401

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def sync_url(url: str) -> str:
    """Map async driver URLs to their sync counterparts for migrations."""
    if url.startswith('postgresql+asyncpg://'):
        return url.replace('postgresql+asyncpg://', 'postgresql://')
    if url.startswith('postgres://'):
        return url.replace('postgres://', 'postgresql://')
    if url.startswith('sqlite+aiosqlite://'):
        return url.replace('sqlite+aiosqlite://', 'sqlite://')
    return url


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    This configures the context with just a URL and not an Engine.
    Calls to context.execute() here emit the given string to the
    script output.
    """
    context.configure(
        url=sync_url(settings.SQLALCHEMY_DATABASE_URI),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    """Run migrations with a database connection."""
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        render_as_batch=connection.dialect.name == "sqlite",
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    url = os.getenv('DATABASE_URL') or settings.SQLALCHEMY_DATABASE_URI
    if not url:
        raise RuntimeError(
            "No database URL configured. "
            "Set DATABASE_URL or individual Postgres environment variables"
        )

    # Override alembic.ini URL with environment-based URL
    config.set_main_option("sqlalchemy.url", sync_url(url))

    # Use sync engine for migrations
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        do_run_migrations(connection)

    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
