"""CLI tests — argument handling that does not need a database."""

from click.testing import CliRunner

from pipecraft import __version__
from pipecraft.cli.main import cli


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_create_admin_rejects_short_password():
    result = CliRunner().invoke(
        cli, ["create-admin", "-e", "root@pipecraft.test", "-n", "Root", "-p", "abc"]
    )
    assert result.exit_code == 1
    assert "at least 6 characters" in result.output


def test_help_lists_commands():
    result = CliRunner().invoke(cli, ["--help"])
    assert result.exit_code == 0
    for command in ("create-admin", "init-db", "users", "ping"):
        assert command in result.output
