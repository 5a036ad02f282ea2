"""Tests for provider configuration."""

import pytest

from depart_mcp.data.config import ProviderConfig, get_provider_config


@pytest.fixture(autouse=True)
def clear_config_cache():
    get_provider_config.cache_clear()
    yield
    get_provider_config.cache_clear()


def test_defaults(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)
    config = ProviderConfig(_env_file=None)

    assert config.api_key is None
    assert config.is_configured is False
    assert config.request_timeout_seconds == 7.0
    assert config.places_timeout_seconds == 5.0
    assert config.timezone == "America/New_York"
    assert config.region_hint == "NY"


def test_reads_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "env_key")
    monkeypatch.setenv("DEPART_REQUEST_TIMEOUT", "3.5")
    monkeypatch.setenv("DEPART_TIMEZONE", "America/Chicago")

    config = get_provider_config()

    assert config.api_key == "env_key"
    assert config.is_configured is True
    assert config.request_timeout_seconds == 3.5
    assert config.timezone == "America/Chicago"


def test_blank_key_is_not_configured():
    config = ProviderConfig(GOOGLE_MAPS_API_KEY="   ")

    assert config.api_key is None
    assert config.is_configured is False


def test_get_provider_config_is_cached(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "env_key")

    assert get_provider_config() is get_provider_config()
