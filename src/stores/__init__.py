"""
Store adapters for the external persistence collaborator.

- protocols: QuestionBankAdapter, ReviewStore, ProgressStore contracts
- memory: dict-backed adapters
- json_bank: exported question bank file
- sql: SQLAlchemy review/progress stores
"""

from .json_bank import JsonQuestionBank, question_from_dict
from .memory import InMemoryProgressStore, InMemoryQuestionBank, InMemoryReviewStore
from .protocols import ProgressStore, QuestionBankAdapter, ReviewStore

__all__ = [
    "QuestionBankAdapter",
    "ReviewStore",
    "ProgressStore",
    "InMemoryQuestionBank",
    "InMemoryReviewStore",
    "InMemoryProgressStore",
    "JsonQuestionBank",
    "question_from_dict",
]
