"""Alembic migration runner for the user directory schema.

Drives Alembic's command API against the project's ``migrations/``
directory. The Alembic scaffolding (env.py, script.py.mako) is written into
that directory on first use, so the repository only has to ship revisions.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool


@dataclass
class MigrationInfo:
    """Info about a single revision."""

    revision: str
    description: str
    is_applied: bool


_SCRIPT_MAKO_TEMPLATE = '''\
"""${message}"""

revision = ${repr(up_revision)}
down_revision = ${repr(down_revision)}

from alembic import op
import sqlalchemy as sa


def upgrade():
    ${upgrades if upgrades else "pass"}


def downgrade():
    ${downgrades if downgrades else "pass"}
'''


def default_migrations_dir(base_path: Path) -> Path:
    return base_path / "migrations"


def _ensure_scaffolding(migrations_dir: Path) -> None:
    (migrations_dir / "versions").mkdir(parents=True, exist_ok=True)

    env_target = migrations_dir / "env.py"
    if not env_target.exists():
        env_target.write_text((Path(__file__).parent / "env.py").read_text())

    mako_target = migrations_dir / "script.py.mako"
    if not mako_target.exists():
        mako_target.write_text(_SCRIPT_MAKO_TEMPLATE)


def make_config(database_url: str, migrations_dir: Path) -> Config:
    """Build an Alembic Config without an ini file."""
    _ensure_scaffolding(migrations_dir)
    cfg = Config()
    cfg.set_main_option("script_location", str(migrations_dir))
    cfg.set_main_option("sqlalchemy.url", database_url)
    return cfg


def apply_migrations(database_url: str, migrations_dir: Path, target: str = "head") -> None:
    """Upgrade the database to ``target`` (default: latest revision)."""
    command.upgrade(make_config(database_url, migrations_dir), target)


def rollback_migration(database_url: str, migrations_dir: Path) -> None:
    """Downgrade the database by one revision."""
    command.downgrade(make_config(database_url, migrations_dir), "-1")


def stamp_migration(database_url: str, migrations_dir: Path, revision: str = "head") -> None:
    """Record ``revision`` as applied without running it.

    For databases whose users table was created by the API's startup
    ``ensure_schema`` before migrations were adopted.
    """
    command.stamp(make_config(database_url, migrations_dir), revision)


def get_migration_status(database_url: str, migrations_dir: Path) -> list[MigrationInfo]:
    """List every revision, oldest first, with whether it is applied."""
    script = ScriptDirectory.from_config(make_config(database_url, migrations_dir))

    engine = create_engine(database_url, poolclass=NullPool)
    try:
        with engine.connect() as conn:
            heads = MigrationContext.configure(conn).get_current_heads()
    finally:
        engine.dispose()

    applied: set[str] = set()
    for head in heads:
        for rev in script.iterate_revisions(head, "base"):
            applied.add(rev.revision)

    infos = [
        MigrationInfo(
            revision=rev.revision,
            description=rev.doc or "",
            is_applied=rev.revision in applied,
        )
        for rev in script.walk_revisions()
    ]
    infos.reverse()
    return infos
