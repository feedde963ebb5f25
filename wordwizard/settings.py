"""
Central application configuration using pydantic-settings.

This module provides typed access to environment-based configuration for:
- the random-word and thesaurus APIs
- the Dreamlo-style leaderboard
- application defaults (player name, logging, server, round delays)

Rule constants live in `wordwizard.config.GameConfig`.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class WordApiSettings(BaseSettings):
    """
    Configuration for the word and synonym sources.

    Environment variables (prefix: WORD_API_):
        WORD_API_WORD_URL          - Random word endpoint returning a JSON array
        WORD_API_THESAURUS_URL     - Thesaurus endpoint (queried with ?word=)
        WORD_API_THESAURUS_API_KEY - API key sent as X-Api-Key
        WORD_API_TIMEOUT_SECONDS   - Request timeout in seconds (default: 10)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="WORD_API_",
    )

    word_url: str = Field(
        default="https://random-word-api.herokuapp.com/word",
        description="Random word endpoint.",
    )
    thesaurus_url: str = Field(
        default="https://api.api-ninjas.com/v1/thesaurus",
        description="Thesaurus endpoint used for hints.",
    )
    thesaurus_api_key: Optional[SecretStr] = Field(
        default=None,
        description="API key for the thesaurus endpoint.",
    )
    timeout_seconds: float = Field(default=10.0, gt=0)


class LeaderboardSettings(BaseSettings):
    """
    Configuration for the remote leaderboard.

    Environment variables (prefix: LEADERBOARD_):
        LEADERBOARD_BASE_URL        - Base URL (default: http://dreamlo.com/lb)
        LEADERBOARD_PRIVATE_CODE    - Code authorizing score submissions
        LEADERBOARD_PUBLIC_CODE     - Code for reading scores
        LEADERBOARD_LIMIT           - Default number of rows to fetch (default: 25)
        LEADERBOARD_TIMEOUT_SECONDS - Request timeout in seconds (default: 10)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="LEADERBOARD_",
    )

    base_url: str = Field(default="http://dreamlo.com/lb")
    private_code: Optional[SecretStr] = Field(default=None)
    public_code: Optional[str] = Field(default=None)
    limit: int = Field(default=25, gt=0, le=1000)
    timeout_seconds: float = Field(default=10.0, gt=0)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def is_configured(self) -> bool:
        """Both codes are needed to submit and read scores."""
        return self.private_code is not None and bool(self.public_code)


class AppSettings(BaseSettings):
    """
    Application-wide defaults.

    Environment variables (prefix: WORDWIZARD_):
        WORDWIZARD_PLAYER_NAME        - Display name used for submissions (default: Player)
        WORDWIZARD_LOG_LEVEL          - Logging level (default: INFO)
        WORDWIZARD_HOST / _PORT       - API server bind address
        WORDWIZARD_WIN_DELAY_SECONDS  - Pause before the next level's word (default: 2)
        WORDWIZARD_LOSS_DELAY_SECONDS - Pause before a lost game restarts (default: 3)
        WORDWIZARD_MAX_WORD_FETCH_ATTEMPTS - Retry budget for long-enough words (default: 50)
        WORDWIZARD_EVENT_LOG_LIMIT    - Events kept per session (default: 1000)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="WORDWIZARD_",
    )

    player_name: str = Field(default="Player", min_length=1)
    log_level: str = Field(default="INFO")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, gt=0, lt=65536)
    win_delay_seconds: float = Field(default=2.0, ge=0)
    loss_delay_seconds: float = Field(default=3.0, ge=0)
    max_word_fetch_attempts: int = Field(default=50, ge=1)
    event_log_limit: int = Field(default=1000, ge=1)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Accept any case; reject names the logging module does not know."""
        level = str(value).upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level


@lru_cache
def get_word_api_settings() -> WordApiSettings:
    """Return cached word API settings instance."""
    return WordApiSettings()


@lru_cache
def get_leaderboard_settings() -> LeaderboardSettings:
    """Return cached leaderboard settings instance."""
    return LeaderboardSettings()


@lru_cache
def get_app_settings() -> AppSettings:
    """Return cached application settings instance."""
    return AppSettings()


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for entry points."""
    logging.basicConfig(
        level=level or get_app_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
