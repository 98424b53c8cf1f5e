"""
Session filter validation.

A SessionFilter arrives from UI/query parameters. Validation happens here,
before the question bank is touched; any problem surfaces as InputError.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from config import Settings, get_settings
from src.core.errors import InputError
from src.core.models import Difficulty, SessionMode


class SessionFilter(BaseModel):
    """Criteria for assembling one session."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    aircraft_type: str | None = Field(default=None, alias="aircraftType")
    categories: tuple[str, ...] = ()
    difficulty: Difficulty | None = None
    count: int = Field(gt=0)
    mode: SessionMode = SessionMode.PRACTICE

    @field_validator("categories", mode="before")
    @classmethod
    def _coerce_categories(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        return value

    @field_validator("aircraft_type", mode="before")
    @classmethod
    def _blank_aircraft_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_params(cls, settings: Settings | None = None, **params: Any) -> SessionFilter:
        """
        Build a filter from loose parameters.

        Fills `count` from settings when missing and enforces the configured
        maximum.

        Raises:
            InputError: count <= 0 or above the maximum, unknown mode or
                difficulty, unexpected fields
        """
        settings = settings or get_settings()
        if params.get("count") is None:
            params["count"] = settings.default_question_count
        try:
            session_filter = cls(**params)
        except ValidationError as e:
            raise InputError(f"Invalid session filter: {_summarize(e)}") from e

        if session_filter.count > settings.max_question_count:
            raise InputError(
                f"Invalid session filter: count {session_filter.count} exceeds "
                f"maximum {settings.max_question_count}"
            )
        return session_filter

    @property
    def is_review(self) -> bool:
        return self.mode == SessionMode.REVIEW


def _summarize(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item["loc"]) or "filter"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)
