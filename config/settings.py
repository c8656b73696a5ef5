"""
Configuration management using Pydantic Settings.
Loads configuration from environment variables (optionally seeded from a
.env file) with validation. Settings are built once at start-up and passed
to the components that need them.
"""
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import Field, StrictInt, field_validator
from pydantic_settings import BaseSettings

from src.common.exceptions import ConfigurationError
from src.common.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_LISTEN_PORT = 9190


class PanasonicSettings(BaseSettings):
    """Breaker box source and exporter listener configuration"""
    url: str
    mappings: Dict[str, StrictInt]
    listen_address: str = Field(default="0.0.0.0")
    listen_port: int = Field(default=DEFAULT_LISTEN_PORT)
    timeout_seconds: Optional[float] = Field(default=None)

    class Config:
        env_prefix = "PANASONIC_"
        frozen = True

    @field_validator("url")
    @classmethod
    def _url_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @field_validator("mappings")
    @classmethod
    def _indices_non_negative(cls, value: Dict[str, int]):
        negative = sorted(key for key, index in value.items() if index < 0)
        if negative:
            raise ValueError(f"negative column index for: {', '.join(negative)}")
        return MappingProxyType(dict(value))

    @field_validator("timeout_seconds")
    @classmethod
    def _timeout_positive(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            raise ValueError("must be greater than zero")
        return value


class LoggingSettings(BaseSettings):
    """Logging configuration"""
    level: str = Field(default="INFO")
    format: str = Field(default="json")

    class Config:
        env_prefix = "LOG_"
        frozen = True


class Settings(BaseSettings):
    """Main settings aggregating all configuration sections"""
    panasonic: PanasonicSettings = Field(default_factory=PanasonicSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    class Config:
        extra = "ignore"
        frozen = True


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Load settings from the environment.

    A .env file is read into os.environ first; variables already set in
    the environment are left untouched.

    Args:
        env_file: Explicit .env path. Defaults to ``.env`` in the working
                  directory, which may be absent.

    Returns:
        Validated, immutable Settings

    Raises:
        ConfigurationError: If the explicit env file is missing, or a
                            required setting is missing or malformed
    """
    if env_file is not None:
        path = Path(env_file)
        if not path.is_file():
            raise ConfigurationError(f"Env file not found: {env_file}")
        load_dotenv(path)
        logger.info(f"Loaded environment from {path}")
    else:
        path = Path.cwd() / ".env"
        if path.is_file():
            load_dotenv(path)
            logger.info(f"Loaded environment from {path}")
        else:
            logger.info("No .env file found, relying on existing environment variables")

    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(
            f"PANASONIC_URL and PANASONIC_MAPPINGS must be set to valid values "
            f"in the .env file or environment: {e}"
        ) from e
