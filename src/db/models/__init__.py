# SQLAlchemy models
from .base import Base
from .progress import CourseCompletion, LessonProgress
from .review import IncorrectQuestion

__all__ = [
    # Base
    "Base",
    # Review queue
    "IncorrectQuestion",
    # Progress
    "LessonProgress",
    "CourseCompletion",
]
