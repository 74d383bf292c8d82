"""
Configuration module.
Owns: Environment variables, settings validation, plugin config mapping.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]

DEFAULT_ENDPOINT = "/api/message"
DEFAULT_TIMEOUT_MS = 5000

# camelCase keys used by router plugin configuration files
_PLUGIN_KEYS = {
    "endpoint": "endpoint",
    "accessToken": "access_token",
    "timeout": "timeout",
}


class Settings(BaseSettings):
    # ======================
    # HTTP API
    # ======================
    endpoint: str = Field(default=DEFAULT_ENDPOINT, alias="HTTP_API_ENDPOINT")
    access_token: str | None = Field(
        default=None,
        alias="HTTP_API_ACCESS_TOKEN",
        description="Shared secret; when set, requests need 'Authorization: Bearer <token>'",
    )
    timeout: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        alias="HTTP_API_TIMEOUT",
        gt=0,
        description="Milliseconds to wait for a brain reply before answering with a timeout error",
    )

    # ======================
    # Router backend
    # ======================
    router_backend: str = Field(
        default="none",
        alias="ROUTER_BACKEND",
        pattern=r"^(none|echo)$",
        description="'echo' binds the local echo router, 'none' waits for an external one",
    )
    echo_delay_ms: int = Field(default=0, alias="ECHO_DELAY_MS", ge=0)

    # ======================
    # Service
    # ======================
    service_env: str = Field(default="dev", alias="SERVICE_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )


def settings_from_plugin_config(config: Mapping[str, Any] | Settings | None) -> Settings:
    """
    Build Settings from a plugin configuration mapping.

    Accepts the camelCase keys of the router's plugin config
    (``endpoint``, ``accessToken``, ``timeout``). Unset or empty values
    fall back to the defaults.
    """
    if isinstance(config, Settings):
        return config

    values: dict[str, Any] = {}
    for key, value in (config or {}).items():
        field = _PLUGIN_KEYS.get(key, key)
        if field in Settings.model_fields and value not in (None, ""):
            values[field] = value
    return Settings(**values)


@lru_cache
def get_settings() -> Settings:
    return Settings()
