"""Database CLI commands: apply, rollback, stamp, status."""

from pathlib import Path

import click

from learnforge.migrations.runner import (
    apply_migrations,
    default_migrations_dir,
    get_migration_status,
    rollback_migration,
    stamp_migration,
)
from learnforge.persistence.config import DatabaseConfig


def _resolve_paths() -> tuple[DatabaseConfig, Path]:
    """Resolve database config and migrations path from cwd."""
    cwd = Path.cwd()
    base_path = cwd.parent if cwd.name == "backend" else cwd
    db_config = DatabaseConfig.from_env(base_path)
    sqlite_path = db_config.sqlite_path
    if sqlite_path is not None:
        sqlite_path.parent.mkdir(parents=True, exist_ok=True)
    return db_config, default_migrations_dir(base_path)


@click.group()
def db():
    """Schema migration commands."""
    pass


@db.command()
@click.option("--target", "-t", default="head", show_default=True, help="Target revision.")
def upgrade(target: str):
    """Apply pending migrations."""
    db_config, migrations_path = _resolve_paths()
    click.echo(f"Applying migrations to: {db_config.url}")
    try:
        apply_migrations(db_config.sqlalchemy_url, migrations_path, target=target)
    except Exception as e:
        click.echo(f"Error applying migrations: {e}", err=True)
        raise SystemExit(1)
    click.echo("Migrations applied successfully.")
    _print_status(db_config.sqlalchemy_url, migrations_path)


@db.command()
def rollback():
    """Rollback the last applied migration."""
    db_config, migrations_path = _resolve_paths()
    try:
        rollback_migration(db_config.sqlalchemy_url, migrations_path)
    except Exception as e:
        click.echo(f"Error rolling back: {e}", err=True)
        raise SystemExit(1)
    click.echo("Rollback successful.")
    _print_status(db_config.sqlalchemy_url, migrations_path)


@db.command()
@click.option("--revision", "-r", default="head", show_default=True)
def stamp(revision: str):
    """Mark a revision as applied without running it.

    Use once on a database whose users table was created by the API at
    startup, before migrations were adopted.
    """
    db_config, migrations_path = _resolve_paths()
    try:
        stamp_migration(db_config.sqlalchemy_url, migrations_path, revision=revision)
    except Exception as e:
        click.echo(f"Error stamping: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"Stamped database as revision '{revision}'.")
    _print_status(db_config.sqlalchemy_url, migrations_path)


@db.command()
def status():
    """Show migration status (applied and pending)."""
    db_config, migrations_path = _resolve_paths()
    _print_status(db_config.sqlalchemy_url, migrations_path)


def _print_status(database_url: str, migrations_dir: Path) -> None:
    """Print migration status table."""
    try:
        infos = get_migration_status(database_url, migrations_dir)
    except Exception as e:
        click.echo(f"Could not read migration status: {e}", err=True)
        return

    if not infos:
        click.echo("No migrations found.")
        return

    applied_count = sum(1 for i in infos if i.is_applied)
    click.echo(f"\nMigration status ({applied_count} applied, {len(infos) - applied_count} pending):")
    for info in infos:
        marker = "[x]" if info.is_applied else "[ ]"
        click.echo(f"  {marker} {info.revision}: {info.description}")
