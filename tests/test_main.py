"""Tests for smartroom.main module."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from smartroom import __version__
from smartroom.main import app, main

runner = CliRunner()


def test_version() -> None:
    """Test that version is defined and follows semver."""
    assert __version__
    parts = __version__.split(".")
    assert len(parts) == 3
    assert all(part.isdigit() for part in parts)


def test_app_shows_help() -> None:
    """Test that app shows help when called with no args."""
    result = runner.invoke(app, [])
    # With no_args_is_help=True, typer shows help but exits with code 2
    assert result.exit_code == 2
    assert "Smart room" in result.stdout or "Usage:" in result.stdout


def test_main_returns_exit_code(monkeypatch: pytest.MonkeyPatch) -> None:
    """main() converts SystemExit into a return code."""
    monkeypatch.setattr("sys.argv", ["smartroom", "list"])
    assert main() == 0
