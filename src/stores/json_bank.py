"""
JSON-file question bank.

Reads an exported question bank: a JSON array of objects with the
authoring tool's camelCase keys (id, question, options, correctAnswer,
explanation, aircraftType, category, difficulty, isActive, createdAt,
reference). `createdAt` may be epoch milliseconds or an ISO timestamp.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from loguru import logger

from src.core.errors import PersistenceUnavailable
from src.core.models import QuestionRecord


def question_from_dict(data: dict[str, Any]) -> QuestionRecord:
    """
    Build a QuestionRecord from an exported question object.

    Raises:
        KeyError: a required key is missing
        ValueError: a value has the wrong shape
    """
    options = data["options"]
    if not isinstance(options, list):
        raise ValueError("options must be a list")
    return QuestionRecord(
        id=str(data.get("id") or data["_id"]),
        question=str(data["question"]),
        options=tuple(str(o) for o in options),
        correct_answer=int(data["correctAnswer"]),
        aircraft_type=str(data.get("aircraftType", "")),
        category=str(data.get("category", "")),
        difficulty=str(data.get("difficulty", "")),
        explanation=str(data.get("explanation") or ""),
        is_active=bool(data.get("isActive", True)),
        created_at=_parse_timestamp(data.get("createdAt")),
        reference=str(data.get("reference") or ""),
    )


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=UTC)
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


class JsonQuestionBank:
    """Question bank backed by a JSON file, loaded once on first use."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._questions: list[QuestionRecord] | None = None

    def list(self) -> list[QuestionRecord]:
        if self._questions is None:
            self._questions = self._load()
        return list(self._questions)

    def _load(self) -> list[QuestionRecord]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceUnavailable(f"Cannot read question bank {self.path}: {e}") from e

        if not isinstance(data, list):
            raise PersistenceUnavailable(f"Question bank {self.path} must contain a JSON array")

        questions = []
        for index, item in enumerate(data):
            try:
                questions.append(question_from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed question #{index} in {self.path.name}: {e!r}")
        logger.info(f"Loaded {len(questions)} questions from {self.path}")
        return questions
