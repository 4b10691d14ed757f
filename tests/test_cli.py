"""Tests for the tuition CLI."""

import pytest
from typer.testing import CliRunner

from tuition.cli import commands
from tuition.cli.commands import app
from tuition.core.credentials import verify_password

from conftest import TEST_PASSWORD

runner = CliRunner()


@pytest.fixture
def use_repository(monkeypatch, repository):
    monkeypatch.setattr(commands, "_get_repository", lambda: repository)
    return repository


class TestReport:
    """Tests for `tuition report`."""

    def test_report(self, use_repository):
        result = runner.invoke(
            app, ["report", "--email", "alice@example.com", "--no-titles"], input=f"{TEST_PASSWORD}\n"
        )
        assert result.exit_code == 0, result.output
        assert "Alice Smith" in result.output
        assert "Overall: 2/4 (50%)" in result.output
        assert "Minuet in G" in result.output
        assert "(50%), 1 left" in result.output

    def test_report_wrong_password(self, use_repository):
        result = runner.invoke(
            app, ["report", "--email", "alice@example.com", "--no-titles"], input="nope\n"
        )
        assert result.exit_code == 1
        assert "Invalid credentials" in result.output

    def test_report_invalid_email(self, use_repository):
        result = runner.invoke(app, ["report", "--email", "alice", "--no-titles"], input="x\n")
        assert result.exit_code == 1
        assert "Invalid email format" in result.output

    def test_report_unconfigured(self, monkeypatch):
        monkeypatch.delenv("SPREADSHEET_ID", raising=False)
        result = runner.invoke(
            app, ["report", "--email", "alice@example.com", "--no-titles"], input="x\n"
        )
        assert result.exit_code == 1
        assert "SPREADSHEET_ID" in result.output


class TestHashPassword:
    """Tests for `tuition hash-password`."""

    def test_hash_password(self):
        result = runner.invoke(app, ["hash-password"], input="s3cret\ns3cret\n")
        assert result.exit_code == 0, result.output
        line = next(l for l in result.output.splitlines() if "pbkdf2_sha256$" in l)
        encoded = line[line.index("pbkdf2_sha256$"):].strip()
        assert verify_password("s3cret", encoded)


class TestNote:
    """Tests for `tuition note`."""

    def test_note(self):
        result = runner.invoke(app, ["note", "440"])
        assert result.exit_code == 0
        assert "A4" in result.output
        assert "in tune" in result.output

    def test_note_flat(self):
        result = runner.invoke(app, ["note", "435"])
        assert result.exit_code == 0
        assert "flat" in result.output

    def test_note_zero(self):
        result = runner.invoke(app, ["note", "0"])
        assert result.exit_code == 1
