"""
Persistence contracts.

The engine does no I/O of its own. Question bank, review queue and
progress storage are external collaborators reached through these narrow
read / upsert-by-key contracts. Implementations must give last-writer-wins
(or compare-and-swap) semantics per key; the engine does not lock.

Adapters raise PersistenceUnavailable when the backing store fails.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from src.core.models import IncorrectQuestionRecord, LessonProgressRecord, QuestionRecord


class QuestionBankAdapter(Protocol):
    """Read-only question source."""

    def list(self) -> list[QuestionRecord]:
        """All questions, active and inactive."""
        ...


class ReviewStore(Protocol):
    """Review-queue records keyed by (user_id, question_id)."""

    def get(self, user_id: str) -> list[IncorrectQuestionRecord]: ...

    def upsert(self, record: IncorrectQuestionRecord) -> None: ...


class ProgressStore(Protocol):
    """Lesson progress keyed by (user_id, lesson_id), plus course completion markers."""

    def get(self, user_id: str, lesson_id: str) -> LessonProgressRecord | None: ...

    def upsert(self, record: LessonProgressRecord) -> None: ...

    def get_course_completion(self, user_id: str, course_id: str) -> datetime | None: ...

    def set_course_completion(self, user_id: str, course_id: str, completed_at: datetime) -> None: ...
