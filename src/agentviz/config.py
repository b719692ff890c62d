"""Application configuration contract."""

from functools import lru_cache
from pathlib import Path

import httpx
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from agentviz.errors import ConfigError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = Field(alias="APP_ENV", default="dev")
    log_level: str = Field(alias="LOG_LEVEL", default="INFO")
    port: int = Field(alias="PORT", default=4242)
    bind_host: str = Field(alias="BIND_HOST", default="127.0.0.1")
    history_capacity: int = Field(alias="HISTORY_CAPACITY", default=100)
    public_dir: str = Field(alias="PUBLIC_DIR", default="public")

    # producer side (hook process)
    data_dir: str = Field(alias="AGENTVIZ_DATA_DIR", default="~/.agentviz")
    server_url: str = Field(alias="AGENTVIZ_SERVER_URL", default="http://localhost:4242/event")
    send_timeout_seconds: float = Field(alias="AGENTVIZ_SEND_TIMEOUT_SECONDS", default=2.0)

    @property
    def events_file(self) -> Path:
        return Path(self.data_dir).expanduser() / "events.jsonl"


def validate_settings_for_env(settings: Settings) -> None:
    import logging as _logging
    import warnings

    _logger = _logging.getLogger(__name__)

    # ingestion is unauthenticated
    if settings.app_env == "prod" and settings.bind_host == "0.0.0.0":
        msg = (
            "SECURITY WARNING: BIND_HOST=0.0.0.0 in production. "
            "Any host on the network can inject events into the feed. "
            "Set BIND_HOST=127.0.0.1 unless remote producers are intended."
        )
        _logger.warning(msg)
        warnings.warn(msg, stacklevel=2)

    invalid: list[str] = []
    if settings.history_capacity < 1:
        invalid.append("HISTORY_CAPACITY(>=1 required)")
    if not 1 <= settings.port <= 65535:
        invalid.append("PORT(1-65535 required)")
    if settings.send_timeout_seconds <= 0:
        invalid.append("AGENTVIZ_SEND_TIMEOUT_SECONDS(>0 required)")
    if not _is_http_url(settings.server_url):
        invalid.append("AGENTVIZ_SERVER_URL(http(s) URL required)")

    if invalid:
        keys = ", ".join(sorted(set(invalid)))
        raise ConfigError(f"invalid configuration: {keys}")


def _is_http_url(value: str) -> bool:
    try:
        url = httpx.URL(value)
    except httpx.InvalidURL:
        return False
    return url.scheme in ("http", "https") and bool(url.host)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
