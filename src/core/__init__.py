"""
Core Module - Shared domain records and error types.

Components:
- models: QuestionRecord, IncorrectQuestionRecord, LessonProgressRecord
- errors: InputError, PersistenceUnavailable, InvariantViolation, ModuleGraphError

Design Principle:
Domain packages (src/categories/, src/sessions/, src/review/, src/progress/)
import records from src/core/ rather than defining their own.
"""

from src.core.errors import (
    InputError,
    InvariantViolation,
    ModuleGraphError,
    PersistenceUnavailable,
    PrepEngineError,
)
from src.core.models import (
    Difficulty,
    IncorrectQuestionRecord,
    LessonProgressRecord,
    QuestionRecord,
    SessionMode,
)

__all__ = [
    # Records
    "QuestionRecord",
    "IncorrectQuestionRecord",
    "LessonProgressRecord",
    "Difficulty",
    "SessionMode",
    # Errors
    "PrepEngineError",
    "InputError",
    "PersistenceUnavailable",
    "InvariantViolation",
    "ModuleGraphError",
]
