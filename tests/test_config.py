"""Settings and plugin config mapping tests."""

import pytest
from pydantic import ValidationError

from genie_http_api.config import Settings, settings_from_plugin_config


def test_defaults():
    settings = Settings()

    assert settings.endpoint == "/api/message"
    assert settings.access_token is None
    assert settings.timeout == 5000
    assert settings.router_backend == "none"


def test_env_aliases(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("HTTP_API_ENDPOINT", "/api/chat")
    monkeypatch.setenv("HTTP_API_ACCESS_TOKEN", "abc")
    monkeypatch.setenv("HTTP_API_TIMEOUT", "1500")

    settings = Settings()

    assert settings.endpoint == "/api/chat"
    assert settings.access_token == "abc"
    assert settings.timeout == 1500


def test_plugin_config_maps_camel_case_keys():
    settings = settings_from_plugin_config(
        {"endpoint": "/custom", "accessToken": "abc", "timeout": 100, "unknown": "ignored"}
    )

    assert settings.endpoint == "/custom"
    assert settings.access_token == "abc"
    assert settings.timeout == 100


def test_plugin_config_empty_values_fall_back_to_defaults():
    settings = settings_from_plugin_config({"endpoint": "", "accessToken": None})

    assert settings.endpoint == "/api/message"
    assert settings.access_token is None


def test_plugin_config_passes_settings_through():
    settings = Settings(timeout=10)
    assert settings_from_plugin_config(settings) is settings
    assert settings_from_plugin_config(None).timeout == 5000


@pytest.mark.parametrize("kwargs", [{"timeout": 0}, {"timeout": -5}, {"router_backend": "kafka"}])
def test_invalid_settings_rejected(kwargs):
    with pytest.raises(ValidationError):
        Settings(**kwargs)
