"""
Review queue table.

One row per (user, question) the user has answered wrong. The composite
primary key makes every write an upsert-by-key.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class IncorrectQuestion(Base):
    """A missed question awaiting review."""

    __tablename__ = "incorrect_questions"

    user_id: Mapped[str] = mapped_column(Text, primary_key=True)
    question_id: Mapped[str] = mapped_column(Text, primary_key=True)

    # Snapshot of the question at failure time
    category: Mapped[str] = mapped_column(Text, nullable=False)
    difficulty: Mapped[str] = mapped_column(Text, nullable=False)
    aircraft_type: Mapped[str] = mapped_column(Text, nullable=False)
    incorrect_answer: Mapped[int | None] = mapped_column(Integer)
    correct_answer: Mapped[int | None] = mapped_column(Integer)
    session_type: Mapped[str | None] = mapped_column(Text)

    # Review workflow
    attempt_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_attempt_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_incorrect_user_unresolved", "user_id", "is_resolved"),
    )

    def __repr__(self) -> str:
        return (
            f"<IncorrectQuestion user={self.user_id} question={self.question_id} "
            f"attempts={self.attempt_count} resolved={self.is_resolved}>"
        )
