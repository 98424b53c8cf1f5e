"""
Review Queue Manager.

Tracks questions a user answered wrong so they can be re-surfaced:

- first miss creates a record (attempt_count=1, unresolved)
- a repeat miss on an unresolved record bumps attempt_count
- a miss on a resolved record re-opens it (attempt_count back to 1)
- a correct answer in a review session resolves it; resolution never
  reverts on its own

Attempt counts let the UI flag "this concept keeps failing" without a
separate analytics layer. All reads and writes go through a ReviewStore.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from loguru import logger

from config import Settings, get_settings
from src.categories.mappings import expand_all, is_wildcard
from src.categories.matcher import CategoryMatcher
from src.core.errors import require_id
from src.core.models import IncorrectQuestionRecord, QuestionRecord, utc_now
from src.stores.protocols import ReviewStore

# attempt_count at which an unresolved record counts as a recurring miss
HOT_ATTEMPT_THRESHOLD = 2


@dataclass
class ReviewStats:
    """Review-queue summary for one user."""

    total: int = 0
    unresolved: int = 0
    resolved: int = 0
    unresolved_by_category: dict[str, int] = field(default_factory=dict)
    unresolved_by_aircraft: dict[str, int] = field(default_factory=dict)
    hot: list[IncorrectQuestionRecord] = field(default_factory=list)

    @property
    def resolution_rate(self) -> float:
        """Share of recorded misses that have been resolved (0-100)."""
        if self.total == 0:
            return 0.0
        return round(self.resolved / self.total * 100, 1)


class ReviewQueueManager:
    """Record misses, resolve them, and list what is left to review."""

    def __init__(
        self,
        store: ReviewStore,
        matcher: CategoryMatcher | None = None,
        settings: Settings | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize manager.

        Args:
            store: Review store (upsert-by-key on user/question)
            matcher: Category matcher for category-narrowed listings
            settings: Settings or None for application settings
            clock: Returns the current UTC datetime (injectable for tests)
        """
        self.store = store
        self.settings = settings or get_settings()
        self.matcher = matcher or CategoryMatcher(min_token_length=self.settings.category_min_token_length)
        self._now = clock or utc_now

    def record_incorrect(
        self,
        user_id: str,
        question_id: str,
        category: str,
        difficulty: str,
        aircraft_type: str,
        *,
        incorrect_answer: int | None = None,
        correct_answer: int | None = None,
        session_type: str | None = None,
    ) -> IncorrectQuestionRecord:
        """
        Record a wrong answer.

        Returns:
            The stored record after the update
        """
        require_id(user_id, "user_id")
        require_id(question_id, "question_id")
        now = self._now()
        existing = self._find(user_id, question_id)

        if existing is None:
            record = IncorrectQuestionRecord(
                user_id=user_id,
                question_id=question_id,
                category=category,
                difficulty=difficulty,
                aircraft_type=aircraft_type,
                attempt_count=1,
                is_resolved=False,
                last_attempt_at=now,
                created_at=now,
            )
        elif existing.is_resolved:
            record = existing
            record.is_resolved = False
            record.attempt_count = 1
            record.last_attempt_at = now
            logger.info(f"Re-opened review item {question_id} for {user_id}")
        else:
            record = existing
            record.attempt_count += 1
            record.last_attempt_at = now
            if record.attempt_count >= HOT_ATTEMPT_THRESHOLD:
                logger.debug(f"{user_id} missed {question_id} {record.attempt_count} times")

        record.incorrect_answer = incorrect_answer
        record.correct_answer = correct_answer
        record.session_type = session_type
        self.store.upsert(record)
        return record

    def record_question_miss(
        self,
        user_id: str,
        question: QuestionRecord,
        selected: int | None,
        session_type: str | None = None,
    ) -> IncorrectQuestionRecord:
        """record_incorrect with the category/difficulty/aircraft snapshot taken from the question."""
        return self.record_incorrect(
            user_id,
            question.id,
            question.category,
            question.difficulty,
            question.aircraft_type,
            incorrect_answer=selected,
            correct_answer=question.correct_answer,
            session_type=session_type,
        )

    def mark_resolved(self, user_id: str, question_id: str) -> bool:
        """
        Resolve a review item. Idempotent; a missing record is a no-op.

        Returns:
            True if an unresolved record was resolved by this call
        """
        require_id(user_id, "user_id")
        existing = self._find(user_id, question_id)
        if existing is None or existing.is_resolved:
            return False

        existing.is_resolved = True
        self.store.upsert(existing)
        logger.info(f"Resolved review item {question_id} for {user_id}")
        return True

    def list_unresolved(
        self,
        user_id: str,
        categories: str | list[str] | tuple[str, ...] | None = None,
    ) -> list[IncorrectQuestionRecord]:
        """
        Unresolved records, oldest first, optionally narrowed by category.

        Category narrowing uses the same matcher cascade as session assembly.
        """
        require_id(user_id, "user_id")
        records = [r for r in self.store.get(user_id) if not r.is_resolved]

        if isinstance(categories, str):
            categories = [categories]
        categories = list(categories) if categories is not None else None
        if not is_wildcard(categories):
            aliases = self._aliases(categories)
            records = [r for r in records if self.matcher.matches(r.category, categories, aliases)]

        records.sort(key=lambda r: (r.created_at, r.question_id))
        return records

    def unresolved_question_ids(
        self,
        user_id: str,
        categories: str | list[str] | tuple[str, ...] | None = None,
    ) -> list[str]:
        """Question ids to feed a review-mode session."""
        return [r.question_id for r in self.list_unresolved(user_id, categories)]

    def stats(self, user_id: str) -> ReviewStats:
        """Summary of a user's review queue."""
        require_id(user_id, "user_id")
        records = self.store.get(user_id)
        unresolved = [r for r in records if not r.is_resolved]
        hot = sorted(
            (r for r in unresolved if r.attempt_count >= HOT_ATTEMPT_THRESHOLD),
            key=lambda r: (-r.attempt_count, r.question_id),
        )
        return ReviewStats(
            total=len(records),
            unresolved=len(unresolved),
            resolved=len(records) - len(unresolved),
            unresolved_by_category=dict(Counter(r.category for r in unresolved)),
            unresolved_by_aircraft=dict(Counter(r.aircraft_type for r in unresolved)),
            hot=hot,
        )

    def _find(self, user_id: str, question_id: str) -> IncorrectQuestionRecord | None:
        for record in self.store.get(user_id):
            if record.question_id == question_id:
                return record
        return None

    def _aliases(self, categories: list[str]) -> list[str]:
        return expand_all(categories) if self.settings.category_use_aliases else []
