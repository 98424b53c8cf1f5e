"""
Progress State Machine.

Per lesson: theory, flashcards and quiz flags plus the best quiz score,
stored through a ProgressStore. Per module: completion and unlock state
derived from the lessons. Per course: a one-way completion marker written
the first time every lesson is complete.

Ordering between the three parts (e.g. quiz only after flashcards) is a
caller policy. This class stores whatever flags it is given.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from loguru import logger

from config import Settings, get_settings
from src.core.errors import InputError, require_id
from src.core.models import LessonProgressRecord, utc_now
from src.progress.lesson import LessonState, is_lesson_completed, lesson_state
from src.progress.modules import ModuleGraph
from src.stores.protocols import ProgressStore


@dataclass
class ModuleProgress:
    """Derived progress of one module for one user."""

    module_id: str
    title: str
    completed_lessons: int
    total_lessons: int
    is_completed: bool
    is_unlocked: bool

    @property
    def percent_complete(self) -> int:
        if self.total_lessons == 0:
            return 100 if self.is_completed else 0
        return round(self.completed_lessons / self.total_lessons * 100)


@dataclass
class CourseProgress:
    """Derived progress of a whole course for one user."""

    course_id: str
    modules: list[ModuleProgress] = field(default_factory=list)
    completed_at: datetime | None = None

    @property
    def completed_lessons(self) -> int:
        return sum(m.completed_lessons for m in self.modules)

    @property
    def total_lessons(self) -> int:
        return sum(m.total_lessons for m in self.modules)

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    @property
    def percent_complete(self) -> int:
        if self.total_lessons == 0:
            return 100 if self.is_completed else 0
        return round(self.completed_lessons / self.total_lessons * 100)


class ProgressStateMachine:
    """Lesson flags, module gating and course completion for one course."""

    def __init__(
        self,
        store: ProgressStore,
        graph: ModuleGraph,
        course_id: str = "default",
        settings: Settings | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize state machine.

        Args:
            store: Progress store (upsert-by-key on user/lesson)
            graph: Validated module graph of the course
            course_id: Key for the course completion marker
            settings: Settings or None for application settings
            clock: Returns the current UTC datetime (injectable for tests)
        """
        self.store = store
        self.graph = graph
        self.course_id = course_id
        self.settings = settings or get_settings()
        self._now = clock or utc_now

    # =========================================================================
    # Lesson updates
    # =========================================================================

    def get_lesson(self, user_id: str, lesson_id: str) -> LessonProgressRecord | None:
        require_id(user_id, "user_id")
        require_id(lesson_id, "lesson_id")
        return self.store.get(user_id, lesson_id)

    def start_lesson(self, user_id: str, lesson_id: str) -> LessonProgressRecord:
        """Create the lesson record if this is the first interaction."""
        record = self.get_lesson(user_id, lesson_id)
        if record is not None:
            return record
        record = LessonProgressRecord(user_id=user_id, lesson_id=lesson_id, updated_at=self._now())
        self.store.upsert(record)
        logger.debug(f"{user_id} started lesson {lesson_id}")
        return record

    def mark_theory(self, user_id: str, lesson_id: str, completed: bool = True) -> LessonProgressRecord:
        """Set (or, as a manual toggle, clear) the theory flag."""

        def apply(record: LessonProgressRecord) -> None:
            record.theory_completed = completed

        return self._update(user_id, lesson_id, apply)

    def mark_flashcards(self, user_id: str, lesson_id: str) -> LessonProgressRecord:
        def apply(record: LessonProgressRecord) -> None:
            record.flashcards_completed = True

        return self._update(user_id, lesson_id, apply)

    def mark_quiz(self, user_id: str, lesson_id: str, score: int) -> LessonProgressRecord:
        """
        Mark the quiz complete with a score.

        The stored score is the best across attempts.

        Raises:
            InputError: score outside 0-100
        """
        score = _validate_score(score)

        def apply(record: LessonProgressRecord) -> None:
            record.quiz_completed = True
            record.quiz_score = max(record.quiz_score, score)

        return self._update(user_id, lesson_id, apply)

    def record_quiz_score(self, user_id: str, lesson_id: str, score: int) -> LessonProgressRecord:
        """Keep a quiz attempt's score (if best) without completing the quiz."""
        score = _validate_score(score)

        def apply(record: LessonProgressRecord) -> None:
            record.quiz_score = max(record.quiz_score, score)

        return self._update(user_id, lesson_id, apply)

    def submit_quiz(self, user_id: str, lesson_id: str, score: int) -> LessonProgressRecord:
        """Complete the quiz when `score` reaches the passing score, else just keep the score."""
        if _validate_score(score) >= self.settings.quiz_passing_score:
            return self.mark_quiz(user_id, lesson_id, score)
        logger.debug(f"{user_id} scored {score} on {lesson_id}, below {self.settings.quiz_passing_score}")
        return self.record_quiz_score(user_id, lesson_id, score)

    def reset_lesson(self, user_id: str, lesson_id: str) -> LessonProgressRecord:
        """
        Clear every flag and the score of a lesson.

        The course completion marker is left alone.
        """
        require_id(user_id, "user_id")
        require_id(lesson_id, "lesson_id")
        record = LessonProgressRecord(user_id=user_id, lesson_id=lesson_id, updated_at=self._now())
        self.store.upsert(record)
        logger.info(f"Reset lesson {lesson_id} for {user_id}")
        return record

    def _update(
        self,
        user_id: str,
        lesson_id: str,
        apply: Callable[[LessonProgressRecord], None],
    ) -> LessonProgressRecord:
        record = self.get_lesson(user_id, lesson_id)
        if record is None:
            record = LessonProgressRecord(user_id=user_id, lesson_id=lesson_id)
        was_completed = record.is_completed

        apply(record)
        record.updated_at = self._now()
        self.store.upsert(record)

        if record.is_completed and not was_completed:
            self._on_lesson_completed(user_id, lesson_id)
        return record

    def _on_lesson_completed(self, user_id: str, lesson_id: str) -> None:
        logger.info(f"{user_id} completed lesson {lesson_id}")
        module_id = self.graph.module_of(lesson_id)
        if module_id is None:
            return

        if self.is_module_completed(user_id, module_id):
            logger.info(f"{user_id} completed module {module_id}")
            for dependent in self.graph.dependents(module_id):
                if self.is_module_unlocked(user_id, dependent):
                    logger.info(f"Module {dependent} unlocked for {user_id}")
            self.check_course_completion(user_id)

    # =========================================================================
    # Derived state
    # =========================================================================

    def lesson_state(self, user_id: str, lesson_id: str) -> LessonState:
        return lesson_state(self.get_lesson(user_id, lesson_id))

    def is_lesson_completed(self, user_id: str, lesson_id: str) -> bool:
        return is_lesson_completed(self.get_lesson(user_id, lesson_id))

    def is_module_completed(self, user_id: str, module_id: str) -> bool:
        """True when every lesson of the module is complete (vacuously for no lessons)."""
        module = self.graph.get(module_id)
        return all(self.is_lesson_completed(user_id, lesson_id) for lesson_id in module.lesson_ids)

    def is_module_unlocked(self, user_id: str, module_id: str) -> bool:
        module = self.graph.get(module_id)
        completed = {p for p in module.prerequisites if self.is_module_completed(user_id, p)}
        return self.graph.is_unlocked(module_id, completed)

    def module_progress(self, user_id: str, module_id: str) -> ModuleProgress:
        module = self.graph.get(module_id)
        completed = sum(1 for lesson_id in module.lesson_ids if self.is_lesson_completed(user_id, lesson_id))
        return ModuleProgress(
            module_id=module.module_id,
            title=module.title,
            completed_lessons=completed,
            total_lessons=len(module.lesson_ids),
            is_completed=completed == len(module.lesson_ids),
            is_unlocked=self.is_module_unlocked(user_id, module_id),
        )

    def modules_status(self, user_id: str) -> list[ModuleProgress]:
        require_id(user_id, "user_id")
        return [self.module_progress(user_id, m.module_id) for m in self.graph.modules]

    def course_progress(self, user_id: str) -> CourseProgress:
        return CourseProgress(
            course_id=self.course_id,
            modules=self.modules_status(user_id),
            completed_at=self.store.get_course_completion(user_id, self.course_id),
        )

    # =========================================================================
    # Course completion
    # =========================================================================

    def check_course_completion(self, user_id: str) -> datetime | None:
        """
        Write the course completion marker if every module is complete.

        One-way: once written, the marker is returned as-is and never
        cleared, even if a lesson is later reset.

        Returns:
            Completion time, or None while the course is incomplete
        """
        require_id(user_id, "user_id")
        completed_at = self.store.get_course_completion(user_id, self.course_id)
        if completed_at is not None:
            return completed_at

        if len(self.graph) == 0:
            return None
        if not all(self.is_module_completed(user_id, m.module_id) for m in self.graph.modules):
            return None

        completed_at = self._now()
        self.store.set_course_completion(user_id, self.course_id, completed_at)
        logger.info(f"{user_id} completed course {self.course_id}")
        return completed_at


def _validate_score(score: object) -> int:
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise InputError(f"Quiz score must be a number, got {score!r}")
    if not 0 <= score <= 100:
        raise InputError(f"Quiz score must be between 0 and 100, got {score}")
    return round(score)
