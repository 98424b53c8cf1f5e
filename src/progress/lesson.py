"""
Lesson progression states.

A lesson moves NotStarted -> TheoryInProgress -> TheoryDone ->
FlashcardsDone -> QuizDone. The three flags are stored independently, so
the state is derived from whatever flags are set: the furthest part
reached wins. Completion is the AND of all three flags and does not depend
on the order they were set in.
"""

from __future__ import annotations

from enum import Enum

from src.core.models import LessonProgressRecord


class LessonState(str, Enum):
    NOT_STARTED = "not_started"
    THEORY_IN_PROGRESS = "theory_in_progress"
    THEORY_DONE = "theory_done"
    FLASHCARDS_DONE = "flashcards_done"
    QUIZ_DONE = "quiz_done"


def lesson_state(record: LessonProgressRecord | None) -> LessonState:
    """Derive the display state of a lesson from its stored flags."""
    if record is None:
        return LessonState.NOT_STARTED
    if record.quiz_completed:
        return LessonState.QUIZ_DONE
    if record.flashcards_completed:
        return LessonState.FLASHCARDS_DONE
    if record.theory_completed:
        return LessonState.THEORY_DONE
    return LessonState.THEORY_IN_PROGRESS


def is_lesson_completed(record: LessonProgressRecord | None) -> bool:
    return record is not None and record.is_completed
