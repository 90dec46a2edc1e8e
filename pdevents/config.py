"""Configuration management for pdevents."""

import logging
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from pdevents import __version__
from pdevents.exceptions import ConfigurationError
from pdevents.models.config import ConnectionConfig

logger = logging.getLogger(__name__)

DEFAULT_EVENTS_URL = "https://events.pagerduty.com/v2/enqueue"


class Settings(BaseSettings):
    """Library defaults loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PAGERDUTY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Endpoint
    events_url: str = Field(default=DEFAULT_EVENTS_URL)

    # Transport defaults
    connect_timeout: float = Field(default=10.0)
    timeout: float = Field(default=60.0)
    verify_ssl: bool = Field(default=True)
    user_agent: str = Field(default=f"pdevents/{__version__}")
    ciphers: str = Field(default="ECDHE+AESGCM:ECDHE+CHACHA20:DHE+AESGCM:!aNULL:!MD5:!DSS")


@lru_cache
def get_settings() -> Settings:
    return Settings()


def load_connection_config(config_path: str | Path) -> ConnectionConfig:
    """Load a connection profile from a YAML file."""
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Connection config not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse {path}: {e}") from e

    try:
        config = ConnectionConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid connection config {path}: {e}") from e

    logger.debug(f"Loaded connection config from {path}")
    return config
