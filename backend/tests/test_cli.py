"""Tests for the LearnForge CLI commands."""

import shutil
from pathlib import Path

import pytest
from click.testing import CliRunner

from learnforge.auth import PasswordService, Role
from learnforge.cli.main import cli
from learnforge.persistence import SQLUserDirectory

REPO_VERSIONS = Path(__file__).parent.parent.parent / "migrations" / "versions"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def db_url(tmp_path, monkeypatch):
    """Point the CLI at a per-test SQLite database."""
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.delenv("LEARNFORGE_DB_PATH", raising=False)
    return url


@pytest.fixture
def project_dir(tmp_path, monkeypatch):
    """Run from a project root holding a copy of the shipped revisions."""
    versions = tmp_path / "migrations" / "versions"
    versions.mkdir(parents=True)
    shutil.copy(REPO_VERSIONS / "0001_create_users_table.py", versions)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _lookup(db_url: str, email: str):
    directory = SQLUserDirectory(db_url)
    try:
        return directory.get_by_email(email)
    finally:
        directory.dispose()


class TestUsersCreate:
    def test_create_instructor(self, runner, db_url):
        result = runner.invoke(
            cli,
            [
                "users", "create",
                "--email", "ines@example.com",
                "--name", "Ines",
                "--role", "instructor",
                "--rounds", "4",
            ],
            input="s3cret-pass\ns3cret-pass\n",
        )

        assert result.exit_code == 0, result.output
        assert "as INSTRUCTOR" in result.output
        record = _lookup(db_url, "ines@example.com")
        assert record.role is Role.INSTRUCTOR
        assert PasswordService(rounds=4).verify("s3cret-pass", record.password_hash)

    def test_create_defaults_to_student(self, runner, db_url):
        result = runner.invoke(
            cli,
            ["users", "create", "--email", "s@example.com", "--name", "Sam", "--rounds", "4"],
            input="pw\npw\n",
        )

        assert result.exit_code == 0, result.output
        assert _lookup(db_url, "s@example.com").role is Role.STUDENT

    def test_duplicate_email_fails(self, runner, db_url):
        args = ["users", "create", "--email", "d@example.com", "--name", "D", "--rounds", "4"]
        runner.invoke(cli, args, input="pw\npw\n")

        result = runner.invoke(cli, args, input="pw\npw\n")

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_unknown_role_rejected(self, runner, db_url):
        result = runner.invoke(
            cli,
            ["users", "create", "--email", "x@example.com", "--name", "X", "--role", "admin"],
            input="pw\npw\n",
        )

        assert result.exit_code != 0


class TestUsersSetRole:
    def test_set_role(self, runner, db_url):
        runner.invoke(
            cli,
            ["users", "create", "--email", "a@example.com", "--name", "A", "--rounds", "4"],
            input="pw\npw\n",
        )

        result = runner.invoke(cli, ["users", "set-role", "a@example.com", "INSTRUCTOR"])

        assert result.exit_code == 0, result.output
        assert "STUDENT -> INSTRUCTOR" in result.output
        assert _lookup(db_url, "a@example.com").role is Role.INSTRUCTOR

    def test_unknown_email_fails(self, runner, db_url):
        result = runner.invoke(cli, ["users", "set-role", "ghost@example.com", "STUDENT"])

        assert result.exit_code == 1
        assert "no user" in result.output


class TestDbCommands:
    def test_status_before_upgrade(self, runner, db_url, project_dir):
        result = runner.invoke(cli, ["db", "status"])

        assert result.exit_code == 0, result.output
        assert "0 applied, 1 pending" in result.output
        assert "[ ] 0001: create users table" in result.output

    def test_upgrade_then_status(self, runner, db_url, project_dir):
        result = runner.invoke(cli, ["db", "upgrade"])

        assert result.exit_code == 0, result.output
        assert "Migrations applied successfully." in result.output
        assert "[x] 0001" in result.output

    def test_rollback(self, runner, db_url, project_dir):
        runner.invoke(cli, ["db", "upgrade"])

        result = runner.invoke(cli, ["db", "rollback"])

        assert result.exit_code == 0, result.output
        assert "Rollback successful." in result.output
        assert "[ ] 0001" in result.output

    def test_stamp(self, runner, db_url, project_dir):
        result = runner.invoke(cli, ["db", "stamp"])

        assert result.exit_code == 0, result.output
        assert "Stamped database as revision 'head'." in result.output
        assert "1 applied, 0 pending" in result.output
