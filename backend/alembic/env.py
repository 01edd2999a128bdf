from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy import create_engine

from alembic import context

from waitlist.core.config import settings
from waitlist.core.base import Base

from waitlist.models.organizer import Organizer, OrganizerSocialProvider  # noqa: F401
from waitlist.models.service import Service  # noqa: F401
from waitlist.models.participant import WaitlistParticipant  # noqa: F401

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Alembic should run with the migrator (DDL-capable) credentials.
# Fall back to the app user if migrator env vars are not defined (e.g. local setups).
if settings.DB_MIGRATOR_USER and settings.DB_MIGRATOR_PASSWORD:
    migrations_url = settings.migrations_database_url
else:
    migrations_url = settings.database_url

# ConfigParser treats "%" as interpolation markers; escape them for the .ini writer.
config.set_main_option("sqlalchemy.url", migrations_url.replace("%", "%%"))

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    Emits SQL to the script output using just the URL; no DBAPI needed.
    """
    context.configure(
        url=migrations_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode against a live connection."""
    connectable = create_engine(
        migrations_url,
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection, target_metadata=target_metadata
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
