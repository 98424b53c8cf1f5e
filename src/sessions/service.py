"""
Session Service.

Ties session assembly to the feedback loop:

- build_session: load the bank, pull the user's unresolved ids for review
  sessions, assemble
- submit_answers: grade, record misses in the review queue, resolve review
  items answered correctly, and store a linked lesson's quiz result
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from config import Settings, get_settings
from src.core.errors import InputError, require_id
from src.core.models import QuestionRecord
from src.progress.state_machine import ProgressStateMachine
from src.review.queue_manager import ReviewQueueManager
from src.sessions.assembler import SessionAssembler, SessionResult
from src.sessions.filters import SessionFilter
from src.stores.protocols import QuestionBankAdapter


@dataclass
class SessionSummary:
    """Graded outcome of one session."""

    total: int
    correct: int
    score: int
    passed: bool
    incorrect_ids: list[str] = field(default_factory=list)
    unanswered_ids: list[str] = field(default_factory=list)
    resolved_ids: list[str] = field(default_factory=list)
    lesson_id: str | None = None

    @property
    def incorrect(self) -> int:
        return self.total - self.correct


class SessionService:
    """Build sessions for a user and feed their results back."""

    def __init__(
        self,
        bank: QuestionBankAdapter,
        review_manager: ReviewQueueManager,
        progress_machine: ProgressStateMachine | None = None,
        assembler: SessionAssembler | None = None,
        settings: Settings | None = None,
    ):
        self.bank = bank
        self.review_manager = review_manager
        self.progress_machine = progress_machine
        self.settings = settings or get_settings()
        self.assembler = assembler or SessionAssembler(settings=self.settings)

    def build_session(
        self,
        user_id: str,
        session_filter: SessionFilter | Mapping[str, Any],
        seed: int | str | None = None,
    ) -> SessionResult:
        """
        Assemble a session for a user.

        Review sessions draw only from the user's unresolved review items,
        narrowed by the filter's categories.

        Raises:
            InputError: malformed filter or user id
            PersistenceUnavailable: a store could not be read
        """
        require_id(user_id, "user_id")
        if not isinstance(session_filter, SessionFilter):
            session_filter = SessionFilter.from_params(self.settings, **dict(session_filter))

        review_ids = None
        if session_filter.is_review:
            review_ids = self.review_manager.unresolved_question_ids(user_id, list(session_filter.categories))
            logger.debug(f"{user_id} has {len(review_ids)} unresolved review items")

        return self.assembler.assemble(self.bank.list(), session_filter, review_ids=review_ids, seed=seed)

    def submit_answers(
        self,
        user_id: str,
        session_filter: SessionFilter,
        questions: Sequence[QuestionRecord],
        answers: Mapping[str, int | None],
        lesson_id: str | None = None,
    ) -> SessionSummary:
        """
        Grade a finished session.

        Args:
            user_id: User who took the session
            session_filter: Filter the session was built with (for its mode)
            questions: Questions presented, in order
            answers: Question id -> selected option index
            lesson_id: Lesson whose quiz this session was, if any

        Returns:
            SessionSummary

        Raises:
            InputError: empty session, malformed user id or non-integer answer
        """
        require_id(user_id, "user_id")
        if not questions:
            raise InputError("Cannot grade an empty session")
        for question_id, selected in answers.items():
            if selected is not None and (isinstance(selected, bool) or not isinstance(selected, int)):
                raise InputError(f"Answer for {question_id} must be an option index, got {selected!r}")

        mode = session_filter.mode.value
        summary = SessionSummary(total=len(questions), correct=0, score=0, passed=False, lesson_id=lesson_id)

        for question in questions:
            selected = answers.get(question.id)
            if question.is_correct(selected):
                summary.correct += 1
                if session_filter.is_review and self.review_manager.mark_resolved(user_id, question.id):
                    summary.resolved_ids.append(question.id)
            elif selected is None:
                summary.unanswered_ids.append(question.id)
            else:
                self.review_manager.record_question_miss(user_id, question, selected, session_type=mode)
                summary.incorrect_ids.append(question.id)

        summary.score = round(summary.correct / summary.total * 100)
        summary.passed = summary.score >= self.settings.quiz_passing_score

        if lesson_id is not None and self.progress_machine is not None:
            self.progress_machine.submit_quiz(user_id, lesson_id, summary.score)

        logger.info(
            f"{user_id} finished {mode} session: {summary.correct}/{summary.total} ({summary.score}%), "
            f"{len(summary.incorrect_ids)} missed, {len(summary.resolved_ids)} resolved"
        )
        return summary
