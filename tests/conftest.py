"""Test configuration and fixtures."""

import json
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import Settings
from app.database import init_db
from assessment_upload.store import AssessmentStore, SqlAssessmentStore, StoreError


class ScriptedStore(AssessmentStore):
    """In-memory store whose operations can be told to fail."""

    def __init__(self, fail_inserts=(), fail_delete=False, fail_levels=()):
        self.rows = []
        self.insert_calls = []
        self.fail_inserts = set(fail_inserts)  # 1-based insert call numbers
        self.fail_delete = fail_delete
        self.fail_levels = set(fail_levels)
        self.deleted = False

    def delete_all(self):
        if self.fail_delete:
            raise StoreError("delete rejected")
        self.rows = []
        self.deleted = True

    def insert(self, rows):
        self.insert_calls.append(len(rows))
        if len(self.insert_calls) in self.fail_inserts:
            raise StoreError(f"insert #{len(self.insert_calls)} rejected")
        self.rows.extend(r.model_dump() for r in rows)

    def count(self, class_level=None):
        if class_level in self.fail_levels:
            raise StoreError(f"count for {class_level} rejected")
        if class_level is None:
            return len(self.rows)
        return sum(1 for r in self.rows if r["class_level"] == class_level)

    def category_counts(self):
        counts = {}
        for r in self.rows:
            key = f"{r['class_level']}-{r['stream']}" + (f"-{r['course']}" if r["course"] else "")
            counts[key] = counts.get(key, 0) + 1
        return counts

    def fetch(self, class_level=None, stream=None, course=None, limit=None):
        out = [
            r for r in self.rows
            if (class_level is None or r["class_level"] == class_level)
            and (stream is None or r["stream"] == stream)
            and (course is None or r["course"] == course)
        ]
        return out[:limit] if limit else out


def write_bank(directory: Path, filename: str, questions, description=None) -> Path:
    payload = {"questions": questions}
    if description is not None:
        payload["description"] = description
    path = directory / filename
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def make_questions(n, prefix="Q"):
    return [
        {
            "question_id": f"{prefix}_{i + 1:03d}",
            "question_text": f"{prefix} question {i + 1}",
            "options": [
                {"option_id": "A", "text": "first"},
                {"option_id": "B", "text": "second"},
            ],
            "correct_answer": "B",
        }
        for i in range(n)
    ]


@pytest.fixture
def sql_store():
    """SQL store over a private in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield SqlAssessmentStore(session_local)
    engine.dispose()


@pytest.fixture
def scripted_store():
    return ScriptedStore()


@pytest.fixture
def settings(tmp_path):
    return Settings(data_dir=tmp_path, database_url="sqlite://")
