"""Alembic environment configuration.

The database URL is resolved in order from ``-x dsn=...`` on the command
line, ``sqlalchemy.url`` when a caller sets it explicitly (the integration
tests do), and finally PostgresConfig (POSTGRES_* environment variables).
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from notification_dispatch.config import PostgresConfig
from notification_dispatch.db.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _get_url() -> str:
    x_args = context.get_x_argument(as_dictionary=True)
    return (
        x_args.get("dsn")
        or config.get_main_option("sqlalchemy.url")
        or PostgresConfig().dsn
    )


def run_migrations_offline() -> None:
    """Emit the notification_logs DDL as SQL without connecting."""
    context.configure(
        url=_get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a single NullPool connection."""
    connectable = engine_from_config(
        {"sqlalchemy.url": _get_url()},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
