"""
Core domain records.

- QuestionRecord: authored, immutable exam question
- IncorrectQuestionRecord: one missed question for one user (review queue)
- LessonProgressRecord: theory/flashcards/quiz completion for one lesson

Per-user records are plain dataclasses; stores hand out copies so the
engine never mutates what another caller holds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from src.core.errors import InvariantViolation


class Difficulty(str, Enum):
    """Authored difficulty tag."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class SessionMode(str, Enum):
    """How an assembled session is presented."""

    PRACTICE = "practice"
    TIMED = "timed"
    REVIEW = "review"


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class QuestionRecord:
    """A single multiple-choice exam question."""

    id: str
    question: str
    options: tuple[str, ...]
    correct_answer: int
    aircraft_type: str
    category: str
    difficulty: str
    explanation: str = ""
    is_active: bool = True
    created_at: datetime | None = None
    reference: str = ""

    def validate(self) -> None:
        """
        Check authored invariants.

        Raises:
            InvariantViolation: fewer than two options, or correct_answer
                outside the option range
        """
        if len(self.options) < 2:
            raise InvariantViolation(self.id, f"needs at least 2 options, has {len(self.options)}")
        if not 0 <= self.correct_answer < len(self.options):
            raise InvariantViolation(
                self.id,
                f"correct_answer {self.correct_answer} outside 0..{len(self.options) - 1}",
            )

    def is_correct(self, selected: int | None) -> bool:
        return selected is not None and selected == self.correct_answer


@dataclass
class IncorrectQuestionRecord:
    """A question the user answered wrong, keyed by (user_id, question_id)."""

    user_id: str
    question_id: str
    category: str
    difficulty: str
    aircraft_type: str
    attempt_count: int = 1
    is_resolved: bool = False
    last_attempt_at: datetime = field(default_factory=utc_now)
    created_at: datetime = field(default_factory=utc_now)
    incorrect_answer: int | None = None
    correct_answer: int | None = None
    session_type: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.user_id, self.question_id)


@dataclass
class LessonProgressRecord:
    """Theory/flashcards/quiz completion for one lesson, keyed by (user_id, lesson_id)."""

    user_id: str
    lesson_id: str
    theory_completed: bool = False
    flashcards_completed: bool = False
    quiz_completed: bool = False
    quiz_score: int = 0
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def key(self) -> tuple[str, str]:
        return (self.user_id, self.lesson_id)

    @property
    def is_completed(self) -> bool:
        """True iff all three parts are done, regardless of order."""
        return self.theory_completed and self.flashcards_completed and self.quiz_completed

    @property
    def overall_progress(self) -> int:
        """Percentage of the three parts completed (0, 33, 67, 100)."""
        done = sum((self.theory_completed, self.flashcards_completed, self.quiz_completed))
        return round(done / 3 * 100)
