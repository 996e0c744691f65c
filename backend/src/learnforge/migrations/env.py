"""Alembic environment for LearnForge migrations.

Configured programmatically by runner.py; there is no alembic.ini. The
users table metadata is exposed as the autogenerate target.
"""

from alembic import context
from sqlalchemy import create_engine, pool

from learnforge.persistence.users import metadata as target_metadata


def run_migrations_offline():
    """Emit SQL to stdout instead of executing it."""
    context.configure(
        url=context.config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    """Execute migrations against the configured database."""
    connectable = create_engine(
        context.config.get_main_option("sqlalchemy.url"),
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
