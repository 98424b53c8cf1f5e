"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

from loguru import logger

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import Settings  # noqa: E402
from src.core.models import QuestionRecord  # noqa: E402
from src.stores.memory import InMemoryProgressStore, InMemoryReviewStore  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (in-memory SQLite, CLI runner)")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def settings():
    """Default settings, ignoring any local .env file."""
    return Settings(_env_file=None, database_url="sqlite:///:memory:")


class FakeClock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + timedelta(seconds=1)
        return current


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_question():
    """Factory for QuestionRecord with sensible defaults."""

    def _make(
        question_id: str,
        aircraft_type: str = "B737_FAMILY",
        category: str = "Fuel",
        difficulty: str = "beginner",
        text: str | None = None,
        options: tuple[str, ...] = ("Option A", "Option B", "Option C", "Option D"),
        correct_answer: int = 0,
        is_active: bool = True,
    ) -> QuestionRecord:
        return QuestionRecord(
            id=question_id,
            question=text or f"Question {question_id}?",
            options=options,
            correct_answer=correct_answer,
            aircraft_type=aircraft_type,
            category=category,
            difficulty=difficulty,
            explanation=f"Explanation for {question_id}",
            is_active=is_active,
        )

    return _make


@pytest.fixture
def review_store():
    return InMemoryReviewStore()


@pytest.fixture
def progress_store():
    return InMemoryProgressStore()


@pytest.fixture
def log_records():
    """Collect loguru records emitted during a test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
