"""
env.py — Alembic environment for the QuoteDesk schema.

The database URL comes from quotedesk settings (DATABASE_URL), never from
alembic.ini. Importing quotedesk.models registers every table on
Base.metadata for autogenerate.

Called by: alembic CLI, tests/test_alembic.py
Depends on: quotedesk.config, quotedesk.models
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from quotedesk.config import get_settings
from quotedesk.models import Base

config = context.config
config.set_main_option("sqlalchemy.url", get_settings().database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _offline() -> None:
    """Emit the migration SQL to stdout."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _online() -> None:
    engine = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    _offline()
else:
    _online()
