"""
Alembic Migration Environment
===============================

What:  Runs migrations with the async engine, against the table layout
       selected by SCHEMA_VARIANT.
How:   The URL comes from bulletin.config (not alembic.ini); the target
       metadata comes from the configured SchemaVariant.
Who:   `alembic upgrade head` / `alembic downgrade base`.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from bulletin.config import settings
from bulletin.variants import get_variant

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

variant = get_variant(settings.schema_variant)
target_metadata = variant.metadata

# Single source of truth for the connection: bulletin.config
# ConfigParser treats % as interpolation, so escape it in passwords
config.set_main_option("sqlalchemy.url", settings.sqlalchemy_url().replace("%", "%%"))


def run_migrations_offline() -> None:
    """Emit SQL to stdout without connecting (alembic upgrade head --sql)."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Connect with an unpooled async engine and run migrations via run_sync()."""
    connect_args = {}
    if settings.db_ssl_mode != "disable" and settings.sqlalchemy_url().startswith("postgresql+asyncpg"):
        connect_args["ssl"] = settings.db_ssl_mode

    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        connect_args=connect_args,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
