"""User administration commands."""

from pathlib import Path

import click

from learnforge.auth import PasswordService, Role
from learnforge.errors import LearnForgeError
from learnforge.persistence import DatabaseConfig, SQLUserDirectory, create_directory

ROLE_CHOICE = click.Choice([r.value for r in Role], case_sensitive=False)


def _open_directory() -> SQLUserDirectory:
    cwd = Path.cwd()
    base_path = cwd.parent if cwd.name == "backend" else cwd
    directory = create_directory(DatabaseConfig.from_env(base_path))
    directory.ensure_schema()
    return directory


@click.group()
def users():
    """Manage user accounts."""
    pass


@users.command()
@click.option("--email", required=True)
@click.option("--name", required=True)
@click.option("--role", type=ROLE_CHOICE, default=Role.STUDENT.value, show_default=True)
@click.password_option()
@click.option("--rounds", default=12, show_default=True, help="bcrypt work factor.")
def create(email: str, name: str, role: str, password: str, rounds: int):
    """Create a password account."""
    directory = _open_directory()
    try:
        record = directory.create(
            name=name,
            email=email,
            role=Role(role.upper()),
            password_hash=PasswordService(rounds=rounds).hash(password),
        )
    except LearnForgeError as e:
        click.echo(f"Error: {e.message}", err=True)
        raise SystemExit(1)
    finally:
        directory.dispose()
    click.echo(f"Created user {record.id} <{record.email}> as {record.role.value}")


@users.command("set-role")
@click.argument("email")
@click.argument("role", type=ROLE_CHOICE)
def set_role(email: str, role: str):
    """Change the role of an existing account."""
    directory = _open_directory()
    try:
        record = directory.get_by_email(email)
        if record is None:
            click.echo(f"Error: no user with email {email}", err=True)
            raise SystemExit(1)
        updated = directory.update_role(record.id, Role(role.upper()))
        if updated is None:
            click.echo(f"Error: user {email} was deleted", err=True)
            raise SystemExit(1)
    finally:
        directory.dispose()
    click.echo(f"{updated.email}: {record.role.value} -> {updated.role.value}")
