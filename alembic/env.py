"""Alembic environment: sync URL derived from ironlog settings."""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool
from sqlalchemy.engine import Connection, make_url

from ironlog.core.config import get_settings
from ironlog.db.base import Base
from ironlog.models import *  # noqa: F401, F403 - register all models

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

settings = get_settings()


def _sync_url() -> str:
    """Alembic runs synchronously: drop the async driver from an explicit DSN."""
    if not settings.database_dsn:
        return settings.database_url
    url = make_url(settings.database_dsn)
    backend = url.get_backend_name()
    driver = {"postgresql": "psycopg2", "sqlite": "pysqlite"}.get(backend)
    return url.set(drivername=f"{backend}+{driver}" if driver else backend).render_as_string(hide_password=False)


config.set_main_option("sqlalchemy.url", _sync_url().replace("%", "%%"))

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode (SQL script only)."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=connection.dialect.name == "sqlite",
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode (connect to DB)."""
    connectable = create_engine(_sync_url(), poolclass=pool.NullPool)
    with connectable.connect() as connection:
        do_run_migrations(connection)
    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
