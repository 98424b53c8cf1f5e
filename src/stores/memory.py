"""
In-memory store adapters.

Dict-backed implementations of the persistence contracts. Records are
copied on the way in and out so callers never share mutable state with the
store.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime

from src.core.models import IncorrectQuestionRecord, LessonProgressRecord, QuestionRecord


class InMemoryQuestionBank:
    """Question bank over a fixed list."""

    def __init__(self, questions: Iterable[QuestionRecord] = ()):
        self._questions = list(questions)

    def list(self) -> list[QuestionRecord]:
        return list(self._questions)

    def add(self, question: QuestionRecord) -> None:
        self._questions.append(question)


class InMemoryReviewStore:
    """Review queue keyed by (user_id, question_id)."""

    def __init__(self):
        self._records: dict[tuple[str, str], IncorrectQuestionRecord] = {}

    def get(self, user_id: str) -> list[IncorrectQuestionRecord]:
        return [replace(r) for (uid, _), r in self._records.items() if uid == user_id]

    def upsert(self, record: IncorrectQuestionRecord) -> None:
        self._records[record.key] = replace(record)


class InMemoryProgressStore:
    """Lesson progress keyed by (user_id, lesson_id)."""

    def __init__(self):
        self._records: dict[tuple[str, str], LessonProgressRecord] = {}
        self._completions: dict[tuple[str, str], datetime] = {}

    def get(self, user_id: str, lesson_id: str) -> LessonProgressRecord | None:
        record = self._records.get((user_id, lesson_id))
        return replace(record) if record is not None else None

    def upsert(self, record: LessonProgressRecord) -> None:
        self._records[record.key] = replace(record)

    def get_course_completion(self, user_id: str, course_id: str) -> datetime | None:
        return self._completions.get((user_id, course_id))

    def set_course_completion(self, user_id: str, course_id: str, completed_at: datetime) -> None:
        self._completions[(user_id, course_id)] = completed_at
