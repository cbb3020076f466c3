from __future__ import annotations

from pathlib import Path

import pytest

from gapfeeder.config import Settings

GAP_ENV_VARS = (
    "ENV_FILE",
    "GAP_RECIPIENTS",
    "GAP_DIRECTORY",
    "GAP_HOSTNAME",
    "GAP_COUNT_NAME",
    "GAP_FILE_GLOB",
    "GAP_SUBJECT",
    "GAP_DEBUG",
    "GAP_MAX_XFER_ALLOWED",
    "GAP_MAIL_COMMAND",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Keep GAP_* variables and stray .env files from leaking into tests."""
    for name in GAP_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def gap_directory(tmp_path) -> Path:
    directory = tmp_path / "logs"
    directory.mkdir()
    return directory


@pytest.fixture
def settings(gap_directory) -> Settings:
    return Settings(
        recipients=("ops@example.com",),
        gap_directory=gap_directory,
        hostname="host",
        gap_count_name="host_gapcount",
        gap_file_glob="host_*.gap",
        subject="Gap-in-sequence messages from host",
        mail_command="mailx",
    )
