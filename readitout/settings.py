"""
Configuration settings for ReadItOut - content to podcast pipeline.
Uses pydantic-settings for environment variable management.
"""
import logging
from pathlib import Path
from typing import Literal

import structlog
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class TwitterSettings(BaseSettings):
    """Twitter/X extraction configuration."""

    model_config = SettingsConfigDict(env_prefix="TWITTER_", env_file=".env", extra="ignore")

    # Optional thread API (second extraction method)
    rapidapi_key: SecretStr | None = Field(default=None, description="RapidAPI key for twitter-api45")
    rapidapi_host: str = Field(default="twitter-api45.p.rapidapi.com")

    request_timeout: float = Field(default=15.0, gt=0)


class LLMSettings(BaseSettings):
    """LLM API configuration for summarization."""

    model_config = SettingsConfigDict(env_prefix="LLM_", env_file=".env", extra="ignore")

    # Provider selection
    provider: Literal["openai", "openrouter"] = Field(default="openai")

    api_key: SecretStr | None = Field(default=None)
    base_url: str | None = Field(default=None, description="Override the provider base URL")

    model: str = Field(default="gpt-4o-mini", description="Fast model, summaries must be quick")
    temperature: float = Field(default=0.7)
    max_input_chars: int = Field(default=8000, ge=500)


class TTSSettings(BaseSettings):
    """Text-to-Speech configuration."""

    model_config = SettingsConfigDict(env_prefix="TTS_", env_file=".env", extra="ignore")

    # API Keys
    google_api_key: SecretStr | None = Field(default=None, description="Google Cloud TTS (primary)")
    elevenlabs_api_key: SecretStr | None = Field(default=None, description="ElevenLabs (fallback)")

    # Google TTS limit is 5000 bytes per request
    chunk_max_bytes: int = Field(default=4500, ge=100, le=5000)
    speaking_rate: float = Field(default=0.95, ge=0.25, le=4.0)

    elevenlabs_model: str = Field(default="eleven_turbo_v2")
    elevenlabs_max_chars: int = Field(default=5000, ge=1)

    request_timeout: float = Field(default=60.0, gt=0)


class StorageSettings(BaseSettings):
    """Podcast store and audio file storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_", env_file=".env", extra="ignore")

    # Store backend
    backend: Literal["memory", "sqlite"] = Field(default="memory")
    db_path: Path = Field(default=Path("data/readitout.db"))

    # Audio files
    audio_dir: Path = Field(default=Path("output/audio"))
    public_base_url: str = Field(default="http://localhost:8000/audio")


class ServerSettings(BaseSettings):
    """HTTP API configuration."""

    model_config = SettingsConfigDict(env_prefix="SERVER_", env_file=".env", extra="ignore")

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=1, le=65535)


class Settings(BaseSettings):
    """Main configuration aggregating all settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Sub-configurations
    twitter: TwitterSettings = Field(default_factory=TwitterSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    tts: TTSSettings = Field(default_factory=TTSSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    # Application settings
    debug: bool = Field(default=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    # No auth: every podcast belongs to this owner
    default_user_id: str = Field(default="local")


def get_settings() -> Settings:
    """Load settings from the environment and .env file."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog for console output at the given level."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        cache_logger_on_first_use=False,
    )
