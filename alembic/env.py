# alembic/env.py

from logging.config import fileConfig
import logging

from alembic import context
from coachdesk.core.database import engine, Base  # the app's engine and Base
from coachdesk.models import trainer, client, exercise, training, nutrition, completion, subscription  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")

target_metadata = Base.metadata


def run_migrations_online() -> None:
    """Run migrations against the app's Engine (DATABASE_URL)."""
    connectable = engine

    # Batch mode for SQLite ALTERs in dev
    render_as_batch = engine.url.get_backend_name().startswith("sqlite")

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
            render_as_batch=render_as_batch,
        )

        with context.begin_transaction():
            context.run_migrations()


# Online mode only; the engine comes from the app settings
run_migrations_online()
