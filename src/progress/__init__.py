"""
Lesson progression and module gating.

- lesson: LessonState derived from the three completion flags
- modules: ModuleDefinition / ModuleGraph (prerequisites, cycle check)
- state_machine: ProgressStateMachine over a ProgressStore
"""

from src.progress.lesson import LessonState, is_lesson_completed, lesson_state
from src.progress.modules import ModuleDefinition, ModuleGraph
from src.progress.state_machine import CourseProgress, ModuleProgress, ProgressStateMachine

__all__ = [
    "LessonState",
    "lesson_state",
    "is_lesson_completed",
    "ModuleDefinition",
    "ModuleGraph",
    "ModuleProgress",
    "CourseProgress",
    "ProgressStateMachine",
]
