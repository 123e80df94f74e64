"""Set up configuration variables."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

DEFAULT_PORT = 3333


class Settings(BaseSettings):
    """Define the settings we need."""

    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore", frozen=True)

    # Default values
    PORT: int = DEFAULT_PORT
    OUTPUT_DIR: Path = Path("/output")
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_TIMEOUT_SECONDS: float | None = None

    # Required for the Plex path (no defaults)
    API_HOST: str = ""
    API_KEY: str = ""

    @field_validator("PORT", mode="before")
    @classmethod
    def _fallback_port(cls, value: Any) -> Any:
        """Fall back to the default port when PORT is not a number."""
        if value in (None, ""):
            return DEFAULT_PORT
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning("Invalid PORT value: %s, using default %d", value, DEFAULT_PORT)
            return DEFAULT_PORT

    @field_validator("DEBUG", mode="before")
    @classmethod
    def _lenient_debug(cls, value: Any) -> Any:
        """Read DEBUG as a flag; unrecognized values mean off."""
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes")
        return value

    @property
    def history_configured(self) -> bool:
        """Check whether the history API can be queried."""
        return bool(self.API_HOST and self.API_KEY)


@lru_cache
def get_settings() -> Settings:
    """Build the settings once per process."""
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Apply the configured verbosity to the package logger."""
    level = logging.DEBUG if settings.DEBUG else logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        logger.warning("Unknown LOG_LEVEL %s, using INFO", settings.LOG_LEVEL)
        level = logging.INFO
    logging.getLogger("watched_relay").setLevel(level)
