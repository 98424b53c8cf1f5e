"""
Session Assembler.

Builds one bounded question list from a SessionFilter:

1. keep active questions (records breaking authored invariants are
   excluded and reported, never fatal)
2. aircraft type (with family aliases)
3. categories (three-tier matcher, canonical keys expanded to aliases)
4. difficulty
5. review mode: intersect with the user's unresolved question ids
6. at most `count` questions; the whole filtered set in bank order when it
   fits, otherwise a uniform sample without replacement

Review sessions never shuffle, and never fall back to the full bank when
the review set is empty. Practice/timed sessions are random per call
unless a seed is given.
"""

from __future__ import annotations

import random
from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from config import Settings, get_settings
from src.categories.mappings import expand_all, is_wildcard
from src.categories.matcher import CategoryMatcher
from src.categories.normalizer import normalize
from src.core.errors import InvariantViolation
from src.core.models import QuestionRecord, SessionMode
from src.sessions.aircraft import aircraft_matches
from src.sessions.filters import SessionFilter


@dataclass(frozen=True)
class SessionResult:
    """Outcome of one assembly call."""

    questions: tuple[QuestionRecord, ...]
    requested: int
    available: int
    mode: SessionMode
    excluded_ids: tuple[str, ...] = field(default_factory=tuple)
    seed: int | str | None = None

    @property
    def is_empty(self) -> bool:
        """No question satisfied the filter. Not an error; the caller decides."""
        return not self.questions

    @property
    def is_partial(self) -> bool:
        """Some questions, but fewer than requested."""
        return 0 < len(self.questions) < self.requested

    @property
    def question_ids(self) -> list[str]:
        return [q.id for q in self.questions]

    def __len__(self) -> int:
        return len(self.questions)

    def __iter__(self):
        return iter(self.questions)


class SessionAssembler:
    """
    Assemble question sessions from an in-memory bank.

    Stateless between calls; safe to share.
    """

    def __init__(self, matcher: CategoryMatcher | None = None, settings: Settings | None = None):
        """
        Initialize assembler.

        Args:
            matcher: Category matcher (defaults to one built from settings)
            settings: Settings or None for the cached application settings
        """
        self.settings = settings or get_settings()
        self.matcher = matcher or CategoryMatcher(min_token_length=self.settings.category_min_token_length)

    def assemble(
        self,
        bank: Iterable[QuestionRecord],
        session_filter: SessionFilter | Mapping[str, Any],
        review_ids: Collection[str] | None = None,
        seed: int | str | None = None,
    ) -> SessionResult:
        """
        Build a session.

        Args:
            bank: Full question bank (active and inactive)
            session_filter: Validated filter, or raw parameters to validate
            review_ids: Unresolved question ids; only used in review mode
            seed: Optional seed for reproducible sampling

        Returns:
            SessionResult (check is_empty / is_partial)

        Raises:
            InputError: when raw parameters do not form a valid filter
        """
        if not isinstance(session_filter, SessionFilter):
            session_filter = SessionFilter.from_params(self.settings, **dict(session_filter))

        candidates, excluded = self.filter_questions(bank, session_filter, review_ids)
        count = session_filter.count

        if len(candidates) <= count:
            selected = candidates
        elif session_filter.is_review:
            selected = candidates[:count]
        else:
            rng = random.Random(seed) if seed is not None else random.Random()
            selected = rng.sample(candidates, count)

        result = SessionResult(
            questions=tuple(selected),
            requested=count,
            available=len(candidates),
            mode=session_filter.mode,
            excluded_ids=tuple(excluded),
            seed=seed,
        )

        if result.is_empty:
            logger.info(
                f"No questions for filter aircraft={session_filter.aircraft_type} "
                f"categories={list(session_filter.categories)} difficulty={session_filter.difficulty} "
                f"mode={session_filter.mode.value}"
            )
        else:
            logger.info(
                f"Assembled {session_filter.mode.value} session: {len(result)} of {count} requested "
                f"({result.available} available)"
            )
        return result

    def filter_questions(
        self,
        bank: Iterable[QuestionRecord],
        session_filter: SessionFilter,
        review_ids: Collection[str] | None = None,
    ) -> tuple[list[QuestionRecord], list[str]]:
        """
        Apply filter steps 1-5 and drop duplicates.

        Returns:
            (candidates in bank order, ids excluded for invariant violations)
        """
        excluded: list[str] = []
        active: list[QuestionRecord] = []
        for question in bank:
            if not question.is_active:
                continue
            try:
                question.validate()
            except InvariantViolation as e:
                logger.warning(f"Excluding invalid question {e.record_id}: {e.reason}")
                excluded.append(e.record_id)
                continue
            active.append(question)
        logger.debug(f"Active questions: {len(active)}")

        candidates = [
            q for q in active
            if aircraft_matches(
                q.aircraft_type,
                session_filter.aircraft_type,
                include_general=self.settings.include_general_questions,
            )
        ]
        logger.debug(f"Aircraft filter {session_filter.aircraft_type}: {len(active)} -> {len(candidates)}")

        categories = list(session_filter.categories)
        if not is_wildcard(categories):
            aliases = self._category_aliases(categories)
            before = len(candidates)
            candidates = [q for q in candidates if self.matcher.matches(q.category, categories, aliases)]
            logger.debug(f"Category filter {categories}: {before} -> {len(candidates)}")

        if session_filter.difficulty is not None:
            wanted = session_filter.difficulty.value
            candidates = [q for q in candidates if q.difficulty == wanted]

        if session_filter.is_review:
            allowed = set(review_ids or ())
            candidates = [q for q in candidates if q.id in allowed]
            logger.debug(f"Review intersection ({len(allowed)} unresolved): {len(candidates)}")

        return _dedupe(candidates, by_text=self.settings.dedupe_question_text), excluded

    def _category_aliases(self, categories: list[str]) -> list[str]:
        return expand_all(categories) if self.settings.category_use_aliases else []


def _dedupe(questions: list[QuestionRecord], by_text: bool = True) -> list[QuestionRecord]:
    """Drop repeated ids (and optionally repeated question texts), keeping the first occurrence."""
    seen_ids: set[str] = set()
    seen_texts: set[str] = set()
    unique: list[QuestionRecord] = []
    for question in questions:
        text_key = normalize(question.question) if by_text else ""
        if question.id in seen_ids or (text_key and text_key in seen_texts):
            continue
        seen_ids.add(question.id)
        if text_key:
            seen_texts.add(text_key)
        unique.append(question)
    return unique
