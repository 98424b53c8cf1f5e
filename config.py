"""
Configuration settings for the type-rating prep engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Database
    # ========================================
    database_url: str = Field(
        default="sqlite:///typerating.db",
        description="SQLAlchemy connection string for review/progress stores",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Category Matching
    # ========================================
    category_min_token_length: int = Field(
        default=1,
        ge=1,
        description="Shortest token considered by the word-overlap tier",
    )
    category_use_aliases: bool = Field(
        default=True,
        description="Expand canonical category keys to their multilingual aliases",
    )

    # ========================================
    # Session Assembly
    # ========================================
    include_general_questions: bool = Field(
        default=False,
        description="Let GENERAL-tagged questions satisfy any aircraft filter",
    )
    dedupe_question_text: bool = Field(
        default=True,
        description="Drop questions whose normalized text repeats an earlier one",
    )
    default_question_count: int = Field(
        default=20,
        ge=1,
        description="Question count used when a filter does not specify one",
    )
    max_question_count: int = Field(
        default=200,
        ge=1,
        description="Largest session a filter may request",
    )

    # ========================================
    # Progress
    # ========================================
    quiz_passing_score: int = Field(
        default=75,
        ge=0,
        le=100,
        description="Score at or above which a linked lesson quiz is marked complete",
    )
    foundation_module_id: str | None = Field(
        default=None,
        description="Module that is always unlocked (defaults to the first module)",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
