"""Alembic environment for the Newsdesk schema.

Online migrations reuse the application's async engine, so the database
URL comes from ``settings.DATABASE_URL`` alone; ``alembic.ini`` only
carries the script location and logging setup.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection

from newsdesk.config import settings
from newsdesk.database import Base, engine

# Registers users / categories / news / comments on Base.metadata.
import newsdesk.models  # noqa: F401

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def _migrate(**configure_kwargs) -> None:
    context.configure(
        target_metadata=Base.metadata,
        # Catches enum and column-length changes during autogenerate.
        compare_type=True,
        # SQLite cannot ALTER most constraints in place.
        render_as_batch=settings.DATABASE_URL.startswith("sqlite"),
        **configure_kwargs,
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate_on(connection: Connection) -> None:
    _migrate(connection=connection)


async def _migrate_online() -> None:
    async with engine.connect() as connection:
        await connection.run_sync(_migrate_on)
    await engine.dispose()


if context.is_offline_mode():
    # Emit the SQL script instead of touching a database.
    _migrate(url=settings.DATABASE_URL, literal_binds=True, dialect_opts={"paramstyle": "named"})
else:
    asyncio.run(_migrate_online())
