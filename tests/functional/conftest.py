from __future__ import annotations

"""Functional test bootstrap for the question authoring service.

Points the application at a file-backed SQLite database under ``tmp/`` before
any ``app`` import, applies ``sqlite_migrations/`` once per session and empties
the tables before every test. A file (not ``:memory:``) is used so concurrent
writers get their own connections.
"""

import os
import pathlib
import uuid

import pytest
from sqlalchemy import text as sql_text

_ROOT = pathlib.Path(__file__).resolve().parents[2]
_DB_FILE = _ROOT / "tmp" / "functional_tests.db"
_DB_FILE.parent.mkdir(parents=True, exist_ok=True)
if _DB_FILE.exists():
    _DB_FILE.unlink()

os.environ["TEST_DATABASE_URL"] = f"sqlite:///{_DB_FILE}"
os.environ["DATABASE_URL"] = os.environ["TEST_DATABASE_URL"]
# Startup auto-migrations are disabled; the session fixture applies them explicitly
os.environ["AUTO_APPLY_MIGRATIONS"] = "0"
os.environ["QUESTIONS_PER_PAGE"] = "3"
os.environ.pop("REORDER_STRICT", None)


def _apply_sqlite_migrations():
    from app.db.base import get_engine
    from app.db.migrations_runner import apply_migrations

    engine = get_engine(os.environ["TEST_DATABASE_URL"])
    sqlite_migrations_dir = _ROOT / "sqlite_migrations"

    # Fresh database file, so start from an empty journal
    journal = sqlite_migrations_dir / "_journal.json"
    if journal.exists():
        journal.unlink()
    apply_migrations(engine, migrations_dir=str(sqlite_migrations_dir))
    return engine


@pytest.fixture(scope="session")
def engine():
    """Session-level bootstrap: apply migrations once for the shared DB."""
    return _apply_sqlite_migrations()


@pytest.fixture(autouse=True)
def clean_tables(engine):
    from app.logic.events import get_buffered_events

    with engine.begin() as conn:
        conn.execute(sql_text("DELETE FROM question_option"))
        conn.execute(sql_text("DELETE FROM question"))
        conn.execute(sql_text("DELETE FROM survey"))
    get_buffered_events(clear=True)
    yield


@pytest.fixture
def make_survey(engine):
    """Factory inserting a survey row; returns its uuid."""

    def _make(owner_id: int = 1, running: bool = False, name: str = "Customer feedback") -> str:
        survey_uuid = str(uuid.uuid4())
        with engine.begin() as conn:
            conn.execute(
                sql_text(
                    "INSERT INTO survey (uuid, owner_id, name, is_running) VALUES (:uuid, :owner, :name, :running)"
                ),
                {"uuid": survey_uuid, "owner": owner_id, "name": name, "running": 1 if running else 0},
            )
        return survey_uuid

    return _make


@pytest.fixture
def set_running(engine):
    def _set(survey_uuid: str, running: bool = True) -> None:
        with engine.begin() as conn:
            conn.execute(
                sql_text("UPDATE survey SET is_running = :running WHERE uuid = :uuid"),
                {"running": 1 if running else 0, "uuid": survey_uuid},
            )

    return _set


@pytest.fixture
def service(engine):
    from app.logic.question_service import QuestionService

    return QuestionService(engine)


@pytest.fixture
def client(engine):
    from fastapi.testclient import TestClient
    from app.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client
