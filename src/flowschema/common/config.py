"""Application configuration using Pydantic Settings.

Loads configuration from environment variables and .env files.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DecoderSettings(BaseSettings):
    """NetFlow v9 decoder behaviour."""

    model_config = SettingsConfigDict(env_prefix="DECODER_")

    # Raise UnknownTemplateError instead of attaching it to the flow set
    raise_on_unknown_template: bool = Field(
        default=False,
        description="Abort the packet when a data flow set has no cached template",
    )

    # Some exporters put the record count in the header instead of the
    # flow set count; disable to walk flow sets until the bytes run out.
    stop_at_flowset_count: bool = Field(
        default=True,
        description="Stop after the header's count of flow sets",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"
    include_timestamp: bool = True
    include_caller: bool = True


class Settings(BaseSettings):
    """Main application settings aggregating all configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Application info
    app_name: str = "flowschema"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"

    # Sub-configurations
    decoder: DecoderSettings = Field(default_factory=DecoderSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings singleton."""
    return Settings()
