from __future__ import annotations

import os
import socket

import pytest

from gapfeeder.config import MAX_COMPRESSED_SIZE, Settings, short_hostname
from gapfeeder.errors import ConfigurationError


def test_defaults_are_computed_from_hostname(monkeypatch):
    monkeypatch.setattr(socket, "gethostname", lambda: "idd.unidata.ucar.edu")

    settings = Settings.resolve()

    assert settings.hostname == "idd"
    assert settings.gap_count_name == "idd_gapcount"
    assert settings.gap_file_glob == "idd_*.gap"
    assert settings.subject == "Gap-in-sequence messages from idd"
    assert settings.max_transfer_size == MAX_COMPRESSED_SIZE
    assert settings.mail_command == "mailx"
    assert settings.debug is False


def test_explicit_hostname_skips_lookup(monkeypatch):
    def fail():
        raise AssertionError("hostname lookup should not happen")

    monkeypatch.setattr(socket, "gethostname", fail)

    settings = Settings.resolve(hostname="node7", subject="custom")

    assert settings.gap_file_glob == "node7_*.gap"
    assert settings.subject == "custom"


def test_unresolvable_hostname_is_configuration_error(monkeypatch):
    def broken():
        raise OSError("no name")

    monkeypatch.setattr(socket, "gethostname", broken)

    with pytest.raises(ConfigurationError):
        Settings.resolve()


@pytest.mark.parametrize(
    ("name", "expected"),
    [("host.example.org", "host"), ("plain", "plain"), (".hidden", ".hidden")],
)
def test_short_hostname(name, expected):
    assert short_hostname(name) == expected


def test_max_transfer_can_only_be_lowered():
    assert Settings.resolve(hostname="h", max_transfer_size=1024).max_transfer_size == 1024
    raised = Settings.resolve(hostname="h", max_transfer_size=MAX_COMPRESSED_SIZE * 4)
    assert raised.max_transfer_size == MAX_COMPRESSED_SIZE


def test_negative_max_transfer_is_rejected():
    with pytest.raises(ConfigurationError):
        Settings.resolve(hostname="h", max_transfer_size=-1)


def test_environment_fills_unset_values(monkeypatch):
    monkeypatch.setenv("GAP_RECIPIENTS", "a@example.com, b@example.com")
    monkeypatch.setenv("GAP_DIRECTORY", "/data/gaps")
    monkeypatch.setenv("GAP_DEBUG", "yes")
    monkeypatch.setenv("GAP_MAX_XFER_ALLOWED", "2048")

    settings = Settings.resolve(hostname="h", recipients=None)

    assert settings.recipients == ("a@example.com", "b@example.com")
    assert str(settings.gap_directory) == "/data/gaps"
    assert settings.debug is True
    assert settings.max_transfer_size == 2048


def test_dotenv_file_is_loaded(tmp_path, monkeypatch):
    env_file = tmp_path / "gaps.env"
    env_file.write_text("GAP_MAIL_COMMAND=echoargs\n", encoding="utf-8")
    monkeypatch.setenv("ENV_FILE", str(env_file))

    try:
        settings = Settings.resolve(hostname="h")
    finally:
        os.environ.pop("GAP_MAIL_COMMAND", None)

    assert settings.mail_command == "echoargs"


def test_cli_value_wins_over_environment(monkeypatch):
    monkeypatch.setenv("GAP_SUBJECT", "from env")

    assert Settings.resolve(hostname="h", subject="from cli").subject == "from cli"


def test_non_integer_environment_limit_is_rejected(monkeypatch):
    monkeypatch.setenv("GAP_MAX_XFER_ALLOWED", "lots")

    with pytest.raises(ConfigurationError):
        Settings.resolve(hostname="h")


def test_settings_are_immutable(settings):
    with pytest.raises(AttributeError):
        settings.subject = "changed"


def test_gap_count_path(settings, gap_directory):
    assert settings.gap_count_path == gap_directory / "host_gapcount"
