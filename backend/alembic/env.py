"""
Alembic Migration Environment
===============================

What:  Runs the journal_entries migrations, online through the async engine
       or offline as a SQL script.
How:   The database URL comes from DATABASE_URL (moodjournal.config) unless
       one is passed on the command line:

           alembic upgrade head
           alembic -x url=postgresql+asyncpg://... upgrade head --sql

       On SQLite, column changes are rendered as batch operations because
       SQLite cannot ALTER most column properties in place.
"""

import asyncio
from logging.config import fileConfig
from typing import Any, Dict

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from moodjournal.config import settings
from moodjournal.database import Base
from moodjournal.models.entry import JournalEntry  # noqa: F401

config = context.config

if config.config_file_name is not None:
    # Leave the application's loggers alone when migrations run in-process.
    fileConfig(config.config_file_name, disable_existing_loggers=False)


def _database_url() -> str:
    return context.get_x_argument(as_dictionary=True).get("url") or settings.database_url


DATABASE_URL = _database_url()

# ConfigParser treats "%" as interpolation; URL-encoded passwords contain it.
config.set_main_option("sqlalchemy.url", DATABASE_URL.replace("%", "%%"))


def _context_options() -> Dict[str, Any]:
    return {
        "target_metadata": Base.metadata,
        "compare_type": True,
        "render_as_batch": DATABASE_URL.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Write the migration SQL to stdout without connecting."""
    context.configure(
        url=DATABASE_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_context_options(),
    )

    with context.begin_transaction():
        context.run_migrations()


def _run_on_connection(connection: Connection) -> None:
    context.configure(connection=connection, **_context_options())

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_on_connection)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
