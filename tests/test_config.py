"""
Tests for settings and logging setup.
"""
import logging

from skycast.config import Settings
from skycast.logging_config import setup_logging


def test_settings_defaults():
    settings = Settings()
    assert settings.FORECAST_DAYS == 7
    assert settings.UPSTREAM_TIMEOUT > 0
    assert settings.MAX_CONCURRENT_WEATHER_REQUESTS >= 1


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("UPSTREAM_TIMEOUT", "2.5")
    monkeypatch.setenv("GEOCODING_LANGUAGE", "it")
    settings = Settings()
    assert settings.UPSTREAM_TIMEOUT == 2.5
    assert settings.GEOCODING_LANGUAGE == "it"


def test_setup_logging_quiets_http_clients():
    setup_logging("DEBUG")
    assert logging.getLogger("skycast").level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING
