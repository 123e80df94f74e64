"""Test configuration loading."""

import logging
from pathlib import Path

from watched_relay.config import Settings, configure_logging


def test_settings_from_environment(monkeypatch):
    """Test that every setting is read from its environment variable."""
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("API_HOST", "test-host")
    monkeypatch.setenv("API_KEY", "test-key")
    monkeypatch.setenv("OUTPUT_DIR", "/test-output")
    monkeypatch.setenv("DEBUG", "true")

    settings = Settings(_env_file=None)

    assert settings.PORT == 8080
    assert settings.API_HOST == "test-host"
    assert settings.API_KEY == "test-key"
    assert settings.OUTPUT_DIR == Path("/test-output")
    assert settings.DEBUG is True
    assert settings.history_configured


def test_settings_defaults(monkeypatch):
    """Test the defaults when nothing is set."""
    for name in ("PORT", "API_HOST", "API_KEY", "OUTPUT_DIR", "DEBUG", "API_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.PORT == 3333
    assert settings.OUTPUT_DIR == Path("/output")
    assert settings.DEBUG is False
    assert settings.API_TIMEOUT_SECONDS is None
    assert not settings.history_configured


def test_invalid_port_falls_back(monkeypatch):
    """Test that a non-numeric PORT uses the default."""
    monkeypatch.setenv("PORT", "not-a-port")

    assert Settings(_env_file=None).PORT == 3333


def test_debug_enables_verbose_logging():
    """Test that DEBUG lowers the package log level."""
    configure_logging(Settings(_env_file=None, DEBUG=True))
    assert logging.getLogger("watched_relay").level == logging.DEBUG

    configure_logging(Settings(_env_file=None, DEBUG=False, LOG_LEVEL="warning"))
    assert logging.getLogger("watched_relay").level == logging.WARNING


def test_unrecognized_debug_value_means_off(monkeypatch):
    """Test that a DEBUG value that is not a flag disables debug instead of failing startup."""
    monkeypatch.setenv("DEBUG", "enabled")
    assert Settings(_env_file=None).DEBUG is False

    monkeypatch.setenv("DEBUG", "TRUE")
    assert Settings(_env_file=None).DEBUG is True
