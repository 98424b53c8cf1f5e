"""
Tests for the in-memory and JSON store adapters.
"""

import json
from datetime import UTC, datetime

import pytest

from src.core.errors import PersistenceUnavailable
from src.core.models import IncorrectQuestionRecord, LessonProgressRecord
from src.stores.json_bank import JsonQuestionBank, question_from_dict
from src.stores.memory import InMemoryProgressStore, InMemoryQuestionBank, InMemoryReviewStore


def _question_dict(question_id="q1", **overrides):
    data = {
        "id": question_id,
        "question": f"Question {question_id}?",
        "options": ["A", "B", "C", "D"],
        "correctAnswer": 1,
        "explanation": "Because.",
        "aircraftType": "B737_FAMILY",
        "category": "Fuel",
        "difficulty": "intermediate",
        "isActive": True,
        "createdAt": 1700000000000,
        "reference": "FCOM 2.28",
    }
    data.update(overrides)
    return data


class TestMemoryStores:
    """Upsert-by-key with copies in and out."""

    def test_review_store_upsert_replaces_by_key(self):
        store = InMemoryReviewStore()
        record = IncorrectQuestionRecord("pilot-1", "q1", "Fuel", "beginner", "B737_FAMILY")
        store.upsert(record)

        record.attempt_count = 5
        assert store.get("pilot-1")[0].attempt_count == 1

        store.upsert(record)
        assert len(store.get("pilot-1")) == 1
        assert store.get("pilot-1")[0].attempt_count == 5

    def test_review_store_returns_copies(self):
        store = InMemoryReviewStore()
        store.upsert(IncorrectQuestionRecord("pilot-1", "q1", "Fuel", "beginner", "B737_FAMILY"))

        store.get("pilot-1")[0].is_resolved = True

        assert store.get("pilot-1")[0].is_resolved is False
        assert store.get("pilot-2") == []

    def test_progress_store(self):
        store = InMemoryProgressStore()
        assert store.get("pilot-1", "l1") is None

        store.upsert(LessonProgressRecord("pilot-1", "l1", theory_completed=True))

        assert store.get("pilot-1", "l1").theory_completed
        assert store.get("pilot-2", "l1") is None

    def test_course_completion(self):
        store = InMemoryProgressStore()
        when = datetime(2024, 5, 1, tzinfo=UTC)

        store.set_course_completion("pilot-1", "a320", when)

        assert store.get_course_completion("pilot-1", "a320") == when
        assert store.get_course_completion("pilot-1", "b737") is None

    def test_question_bank(self, make_question):
        bank = InMemoryQuestionBank([make_question("q1")])
        bank.add(make_question("q2"))

        assert [q.id for q in bank.list()] == ["q1", "q2"]


class TestQuestionFromDict:
    """Exported camelCase question objects."""

    def test_full_record(self):
        question = question_from_dict(_question_dict())

        assert question.id == "q1"
        assert question.options == ("A", "B", "C", "D")
        assert question.correct_answer == 1
        assert question.aircraft_type == "B737_FAMILY"
        assert question.reference == "FCOM 2.28"
        assert question.created_at == datetime.fromtimestamp(1700000000, tz=UTC)

    def test_iso_timestamp_and_defaults(self):
        data = _question_dict(createdAt="2024-03-01T10:00:00+00:00")
        del data["isActive"]
        del data["explanation"]

        question = question_from_dict(data)

        assert question.created_at == datetime(2024, 3, 1, 10, tzinfo=UTC)
        assert question.is_active is True
        assert question.explanation == ""

    def test_convex_style_id(self):
        data = _question_dict()
        data["_id"] = data.pop("id")
        assert question_from_dict(data).id == "q1"

    def test_missing_required_key(self):
        data = _question_dict()
        del data["options"]
        with pytest.raises(KeyError):
            question_from_dict(data)


class TestJsonQuestionBank:
    """JSON file adapter."""

    def test_loads_and_skips_malformed(self, tmp_path, log_records):
        path = tmp_path / "bank.json"
        path.write_text(
            json.dumps([_question_dict("q1"), {"id": "broken"}, _question_dict("q2")]),
            encoding="utf-8",
        )

        bank = JsonQuestionBank(path)

        assert [q.id for q in bank.list()] == ["q1", "q2"]
        assert any("Skipping malformed question #1" in r["message"] for r in log_records)

    def test_missing_file(self, tmp_path):
        with pytest.raises(PersistenceUnavailable):
            JsonQuestionBank(tmp_path / "missing.json").list()

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bank.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(PersistenceUnavailable):
            JsonQuestionBank(path).list()

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "bank.json"
        path.write_text(json.dumps({"questions": []}), encoding="utf-8")
        with pytest.raises(PersistenceUnavailable, match="JSON array"):
            JsonQuestionBank(path).list()
