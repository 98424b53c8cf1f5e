"""
Lesson progress and course completion tables.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class LessonProgress(Base):
    """Theory/flashcards/quiz flags for one user and lesson."""

    __tablename__ = "lesson_progress"

    user_id: Mapped[str] = mapped_column(Text, primary_key=True)
    lesson_id: Mapped[str] = mapped_column(Text, primary_key=True)

    theory_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    flashcards_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    quiz_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    quiz_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return (
            f"<LessonProgress user={self.user_id} lesson={self.lesson_id} "
            f"theory={self.theory_completed} flashcards={self.flashcards_completed} "
            f"quiz={self.quiz_completed}>"
        )


class CourseCompletion(Base):
    """Terminal course-completion marker. Written once, never cleared."""

    __tablename__ = "course_completions"

    user_id: Mapped[str] = mapped_column(Text, primary_key=True)
    course_id: Mapped[str] = mapped_column(Text, primary_key=True)
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
