# ABOUTME: Centralized configuration using Pydantic Settings.
# ABOUTME: Loads settings from init args, environment, .env and config.yaml.

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_FEEDS = ["http://feeds.bbci.co.uk/news/uk/rss.xml"]
DEFAULT_PORT = 1323
CONFIG_FILE = Path("config.yaml")


class Settings(BaseSettings):
    """Application settings loaded from environment variables and config.yaml."""

    model_config = SettingsConfigDict(
        env_prefix="ESQIMO_",
        env_file=".env",
        env_file_encoding="utf-8",
        yaml_file=CONFIG_FILE,
        extra="ignore",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT

    # Feeds
    feeds: list[str] = Field(default_factory=lambda: list(DEFAULT_FEEDS))
    refresh_interval: float = 600.0  # seconds between the end of one cycle and the next
    refresh_timeout: float | None = None  # per-cycle limit on fetch + build
    feed_timeout: int = 10
    feed_user_agent: str = "esqimo/0.1 (+https://github.com/josephroberts/esqimo)"

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"

    @field_validator("port", mode="before")
    @classmethod
    def _strip_port_colon(cls, value: object) -> object:
        """Accept the ":1323" listen-address form used by older config files."""
        if isinstance(value, str):
            return value.strip().lstrip(":")
        return value

    @field_validator("refresh_interval")
    @classmethod
    def _positive_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("refresh_interval must be positive")
        return value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Read config.yaml below the environment and .env sources."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    A missing config.yaml is not an error; the hardcoded defaults apply.
    """
    return Settings()
