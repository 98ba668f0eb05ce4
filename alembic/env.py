"""
alembic.env

Alembic migration environment configuration.

Responsibilities:
- Provide metadata discovery for autogeneration.
- Configure offline/online migration execution.

Notes:
- This module is executed by Alembic, not imported by the FastAPI runtime.
- The runtime uses an async driver (e.g. `sqlite+aiosqlite`); migrations run
  synchronously, so the async driver suffix is stripped from the URL.
"""

from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import make_url

from peer_review.db import models  # noqa: F401  # ensure models are registered on Base.metadata
from peer_review.db.base import Base
from peer_review.settings import Settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# async driver -> sync driver (None: the backend default)
_ASYNC_DRIVERS = {"aiosqlite": None}


def _get_database_url() -> str:
    raw = os.environ.get("PEER_REVIEW_DATABASE_URL") or Settings().database_url
    url = make_url(raw)
    driver = url.get_driver_name()
    if driver in _ASYNC_DRIVERS:
        sync_driver = _ASYNC_DRIVERS[driver]
        backend = url.get_backend_name()
        url = url.set(drivername=f"{backend}+{sync_driver}" if sync_driver else backend)
    return url.render_as_string(hide_password=False)


def run_migrations_offline() -> None:
    context.configure(
        url=_get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = _get_database_url()
    connectable = engine_from_config(configuration, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        # batch mode lets ALTER TABLE autogenerate work on SQLite.
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
