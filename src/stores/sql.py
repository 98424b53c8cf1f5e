"""
SQLAlchemy-backed review and progress stores.

Every write is a `session.merge` on the table's composite primary key,
i.e. upsert-by-key with last-writer-wins. Driver failures surface as
PersistenceUnavailable; there are no retries here.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from contextlib import contextmanager
from datetime import UTC, datetime

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from src.core.errors import PersistenceUnavailable
from src.core.models import IncorrectQuestionRecord, LessonProgressRecord
from src.db.database import get_session_factory, session_scope
from src.db.models import CourseCompletion, IncorrectQuestion, LessonProgress


def _aware(value: datetime) -> datetime:
    """SQLite drops tzinfo; treat naive timestamps as UTC."""
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


class _SqlStore:
    def __init__(self, session_factory: sessionmaker[Session] | Callable[[], Session] | None = None):
        self._factory = session_factory

    @contextmanager
    def _scope(self, action: str) -> Generator[Session, None, None]:
        try:
            with session_scope(self._factory or get_session_factory()) as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(f"{type(self).__name__} {action} failed: {e}")
            raise PersistenceUnavailable(f"{action} failed: {e}") from e


class SqlReviewStore(_SqlStore):
    """ReviewStore over the incorrect_questions table."""

    def get(self, user_id: str) -> list[IncorrectQuestionRecord]:
        with self._scope("review get") as session:
            rows = session.scalars(
                select(IncorrectQuestion)
                .where(IncorrectQuestion.user_id == user_id)
                .order_by(IncorrectQuestion.created_at)
            ).all()
            return [_review_record(row) for row in rows]

    def upsert(self, record: IncorrectQuestionRecord) -> None:
        with self._scope("review upsert") as session:
            session.merge(
                IncorrectQuestion(
                    user_id=record.user_id,
                    question_id=record.question_id,
                    category=record.category,
                    difficulty=record.difficulty,
                    aircraft_type=record.aircraft_type,
                    incorrect_answer=record.incorrect_answer,
                    correct_answer=record.correct_answer,
                    session_type=record.session_type,
                    attempt_count=record.attempt_count,
                    is_resolved=record.is_resolved,
                    last_attempt_at=record.last_attempt_at,
                    created_at=record.created_at,
                )
            )


class SqlProgressStore(_SqlStore):
    """ProgressStore over the lesson_progress and course_completions tables."""

    def get(self, user_id: str, lesson_id: str) -> LessonProgressRecord | None:
        with self._scope("progress get") as session:
            row = session.get(LessonProgress, (user_id, lesson_id))
            if row is None:
                return None
            return LessonProgressRecord(
                user_id=row.user_id,
                lesson_id=row.lesson_id,
                theory_completed=row.theory_completed,
                flashcards_completed=row.flashcards_completed,
                quiz_completed=row.quiz_completed,
                quiz_score=row.quiz_score,
                updated_at=_aware(row.updated_at),
            )

    def upsert(self, record: LessonProgressRecord) -> None:
        with self._scope("progress upsert") as session:
            session.merge(
                LessonProgress(
                    user_id=record.user_id,
                    lesson_id=record.lesson_id,
                    theory_completed=record.theory_completed,
                    flashcards_completed=record.flashcards_completed,
                    quiz_completed=record.quiz_completed,
                    quiz_score=record.quiz_score,
                    updated_at=record.updated_at,
                )
            )

    def get_course_completion(self, user_id: str, course_id: str) -> datetime | None:
        with self._scope("course completion get") as session:
            row = session.get(CourseCompletion, (user_id, course_id))
            return _aware(row.completed_at) if row is not None else None

    def set_course_completion(self, user_id: str, course_id: str, completed_at: datetime) -> None:
        with self._scope("course completion set") as session:
            session.merge(CourseCompletion(user_id=user_id, course_id=course_id, completed_at=completed_at))


def _review_record(row: IncorrectQuestion) -> IncorrectQuestionRecord:
    return IncorrectQuestionRecord(
        user_id=row.user_id,
        question_id=row.question_id,
        category=row.category,
        difficulty=row.difficulty,
        aircraft_type=row.aircraft_type,
        attempt_count=row.attempt_count,
        is_resolved=row.is_resolved,
        last_attempt_at=_aware(row.last_attempt_at),
        created_at=_aware(row.created_at),
        incorrect_answer=row.incorrect_answer,
        correct_answer=row.correct_answer,
        session_type=row.session_type,
    )
