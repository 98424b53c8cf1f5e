"""
Integration tests for the prep CLI.

Commands run through typer's CliRunner against a temporary SQLite file.

Usage:
    pytest tests/integration/test_cli.py -v
"""

import json

import pytest
from typer.testing import CliRunner

from config import get_settings
from src.cli.prep_cli import app
from src.db import database

runner = CliRunner()


@pytest.fixture
def cli_db(tmp_path, monkeypatch):
    """Point the CLI at a fresh SQLite database."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'prep.db'}")
    get_settings.cache_clear()
    monkeypatch.setattr(database, "_engine", None)
    monkeypatch.setattr(database, "_SessionLocal", None)
    database.init_db()
    yield
    database.get_engine().dispose()
    get_settings.cache_clear()


@pytest.fixture
def bank_file(tmp_path):
    questions = []
    for aircraft, prefix in (("B737_FAMILY", "b737"), ("A320_FAMILY", "a320")):
        for i in range(10):
            questions.append(
                {
                    "id": f"{prefix}-{i}",
                    "question": f"{prefix} fuel question {i}?",
                    "options": ["A", "B", "C"],
                    "correctAnswer": 0,
                    "aircraftType": aircraft,
                    "category": "Fuel",
                    "difficulty": "beginner",
                }
            )
    path = tmp_path / "bank.json"
    path.write_text(json.dumps(questions), encoding="utf-8")
    return path


@pytest.fixture
def course_file(tmp_path):
    path = tmp_path / "a320.json"
    path.write_text(
        json.dumps(
            {
                "id": "a320",
                "title": "A320 Type Rating",
                "modules": [
                    {"id": "m1", "title": "General", "lessons": ["l1"]},
                    {"id": "m2", "title": "Fuel", "lessons": ["l2"]},
                    {"id": "m3", "title": "Hydraulics", "lessons": ["l3"]},
                ],
            }
        ),
        encoding="utf-8",
    )
    return path


class TestPureCommands:
    """Commands that never touch the database."""

    def test_categories(self):
        result = runner.invoke(app, ["categories"])

        assert result.exit_code == 0
        assert "electrical" in result.output
        assert "fuel" in result.output

    def test_match_substring(self):
        result = runner.invoke(app, ["match", "Electrical Systems", "Electrical"])

        assert result.exit_code == 0
        assert "Match (substring)" in result.output

    def test_match_requires_mapping_for_spanish_label(self):
        raw = runner.invoke(app, ["match", "Sistema Eléctrico", "Electrical", "--no-aliases"])
        mapped = runner.invoke(app, ["match", "Sistema Eléctrico", "Electrical"])

        assert "No match" in raw.output
        assert "Match (exact)" in mapped.output
        assert "Canonical key: electrical" in mapped.output

    def test_match_short_alias_inside_word(self):
        result = runner.invoke(app, ["match", "Engine Oils", "navigation"])

        assert "No match" in result.output
        assert "Canonical key: unknown" in result.output

    def test_assemble(self, bank_file):
        result = runner.invoke(
            app,
            ["assemble", str(bank_file), "--aircraft", "B737_FAMILY", "--category", "fuel", "--count", "5", "--seed", "7"],
        )

        assert result.exit_code == 0
        assert "Practice session: 5 of 5" in result.output
        assert "a320" not in result.output

    def test_assemble_partial(self, bank_file):
        result = runner.invoke(app, ["assemble", str(bank_file), "--aircraft", "B737", "--count", "15"])

        assert result.exit_code == 0
        assert "Only 10 questions matched" in result.output

    def test_assemble_empty(self, bank_file):
        result = runner.invoke(app, ["assemble", str(bank_file), "--aircraft", "E190"])

        assert result.exit_code == 0
        assert "No questions available" in result.output

    @pytest.mark.parametrize("args", [["--count", "0"], ["--mode", "exam"], ["--difficulty", "expert"]])
    def test_assemble_rejects_bad_filter(self, bank_file, args):
        result = runner.invoke(app, ["assemble", str(bank_file), *args])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_assemble_missing_bank(self, tmp_path):
        result = runner.invoke(app, ["assemble", str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "Cannot read question bank" in result.output


class TestDatabaseCommands:
    """Commands backed by the SQL stores."""

    def test_init_db(self, cli_db):
        result = runner.invoke(app, ["init-db"])

        assert result.exit_code == 0
        assert "Database initialized" in result.output

    def test_review(self, cli_db):
        from src.review.queue_manager import ReviewQueueManager
        from src.stores.sql import SqlReviewStore

        manager = ReviewQueueManager(SqlReviewStore())
        manager.record_incorrect("pilot-1", "b737-3", "Fuel", "beginner", "B737_FAMILY")
        manager.record_incorrect("pilot-1", "b737-3", "Fuel", "beginner", "B737_FAMILY")

        result = runner.invoke(app, ["review", "pilot-1"])

        assert result.exit_code == 0
        assert "1 unresolved" in result.output
        assert "b737-3" in result.output

    def test_review_empty(self, cli_db):
        result = runner.invoke(app, ["review", "pilot-9"])

        assert result.exit_code == 0
        assert "Nothing to review" in result.output

    def test_assemble_review_mode(self, cli_db, bank_file):
        from src.review.queue_manager import ReviewQueueManager
        from src.stores.sql import SqlReviewStore

        ReviewQueueManager(SqlReviewStore()).record_incorrect("pilot-1", "a320-4", "Fuel", "beginner", "A320_FAMILY")

        result = runner.invoke(app, ["assemble", str(bank_file), "--mode", "review", "--user", "pilot-1"])

        assert result.exit_code == 0
        assert "Review session: 1 of 20" in result.output
        assert "a320-4" in result.output

    def test_progress(self, cli_db, course_file):
        from src.progress.modules import ModuleGraph
        from src.progress.state_machine import ProgressStateMachine
        from src.stores.sql import SqlProgressStore

        graph = ModuleGraph.from_dict(json.loads(course_file.read_text(encoding="utf-8")))
        machine = ProgressStateMachine(SqlProgressStore(), graph, course_id="a320")
        machine.mark_theory("pilot-1", "l1")
        machine.mark_flashcards("pilot-1", "l1")
        machine.mark_quiz("pilot-1", "l1", 90)

        result = runner.invoke(app, ["progress", "pilot-1", str(course_file)])

        assert result.exit_code == 0
        assert "complete" in result.output
        assert "unlocked" in result.output
        assert "locked" in result.output
        assert "Course: 1/3 lessons (33%)" in result.output

    def test_progress_rejects_cyclic_course(self, cli_db, tmp_path):
        path = tmp_path / "cyclic.json"
        path.write_text(
            json.dumps(
                {
                    "sequential": False,
                    "modules": [
                        {"id": "m1", "prerequisites": ["m2"]},
                        {"id": "m2", "prerequisites": ["m1"]},
                    ],
                }
            ),
            encoding="utf-8",
        )

        result = runner.invoke(app, ["progress", "pilot-1", str(path)])

        assert result.exit_code == 1
        assert "Circular module dependency" in result.output
