"""
Tests for lesson progress records and derived lesson states.
"""

import itertools

import pytest

from src.core.models import LessonProgressRecord
from src.progress.lesson import LessonState, is_lesson_completed, lesson_state


def _record(theory=False, flashcards=False, quiz=False):
    return LessonProgressRecord(
        user_id="pilot-1",
        lesson_id="lesson-1",
        theory_completed=theory,
        flashcards_completed=flashcards,
        quiz_completed=quiz,
    )


class TestIsCompleted:
    """isCompleted is the AND of the three flags."""

    @pytest.mark.parametrize("theory,flashcards,quiz", list(itertools.product([False, True], repeat=3)))
    def test_all_combinations(self, theory, flashcards, quiz):
        record = _record(theory, flashcards, quiz)
        assert record.is_completed is (theory and flashcards and quiz)
        assert is_lesson_completed(record) is record.is_completed

    def test_missing_record_is_not_completed(self):
        assert is_lesson_completed(None) is False


class TestOverallProgress:
    """Share of the three parts done."""

    @pytest.mark.parametrize(
        "flags,expected",
        [
            ((False, False, False), 0),
            ((True, False, False), 33),
            ((False, True, True), 67),
            ((True, True, True), 100),
        ],
    )
    def test_overall_progress(self, flags, expected):
        assert _record(*flags).overall_progress == expected


class TestLessonState:
    """Display state derived from flags."""

    @pytest.mark.parametrize(
        "record,state",
        [
            (None, LessonState.NOT_STARTED),
            (_record(), LessonState.THEORY_IN_PROGRESS),
            (_record(theory=True), LessonState.THEORY_DONE),
            (_record(theory=True, flashcards=True), LessonState.FLASHCARDS_DONE),
            (_record(theory=True, flashcards=True, quiz=True), LessonState.QUIZ_DONE),
            (_record(quiz=True), LessonState.QUIZ_DONE),
        ],
    )
    def test_lesson_state(self, record, state):
        assert lesson_state(record) == state

    def test_quiz_done_out_of_order_is_not_completed(self):
        record = _record(quiz=True)
        assert lesson_state(record) == LessonState.QUIZ_DONE
        assert not record.is_completed
