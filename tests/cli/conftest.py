"""
Shared pytest fixtures for the selftime CLI tests.
"""
from pathlib import Path

import pytest
from typer.testing import CliRunner


@pytest.fixture(scope="session")
def runner() -> CliRunner:
    """Return a Typer CliRunner instance for invoking commands."""
    return CliRunner()


@pytest.fixture
def monkeypatch_cwd_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Change the working directory to a temporary path for the test."""
    monkeypatch.chdir(tmp_path)
    for key in ("SELFTIME_STRICT_CLOCK", "SELFTIME_ASCII_UNITS", "SELFTIME_LOG_SCOPES", "SELFTIME_TABLE_TITLE"):
        monkeypatch.delenv(key, raising=False)
    return tmp_path
