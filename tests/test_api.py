"""Test the HTTP read/admin API."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import app, configure_cors, get_settings, get_store, list_levels
from conftest import ScriptedStore, make_questions, write_bank


@pytest.fixture
def store():
    return ScriptedStore()


@pytest.fixture
def client(tmp_path, store):
    app.dependency_overrides[get_settings] = lambda: Settings(data_dir=tmp_path)
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def test_levels(client):
    resp = client.get("/api/levels")
    assert resp.status_code == 200
    assert resp.json() == {"levels": ["10", "11", "12", "UG", "general"]}


def test_categories_for_combined_file(client):
    resp = client.get("/api/categories/Academic_Test_11th12th_Arts_BEd.json")
    assert resp.status_code == 200
    body = resp.json()
    assert [c["class_level"] for c in body] == ["11", "12"]
    assert body[0]["course"] == "BEd"


def test_categories_unknown_file(client):
    assert client.get("/api/categories/Nope.json").status_code == 404


def test_upload_then_read_and_verify(client, tmp_path):
    write_bank(tmp_path, "Academic_Test_10th_Science.json", make_questions(3, "SCI"))
    write_bank(tmp_path, "Psychometric_Aptitude_Test.json", make_questions(2, "APT"))

    resp = client.post("/api/upload")
    assert resp.status_code == 200
    summary = resp.json()
    assert summary["status"] == "success"
    assert summary["total_uploaded"] == 5

    resp = client.get("/api/assessments", params={"class_level": "general"})
    assert resp.status_code == 200
    assert [q["question_id"] for q in resp.json()] == ["APT_001", "APT_002"]

    resp = client.get("/api/verify")
    assert resp.json()["by_level"]["10"] == 3


def test_upload_reports_partial_failure_in_body(client, tmp_path, store):
    write_bank(tmp_path, "Academic_Test_10th_Science.json", make_questions(60))
    store.fail_inserts = {2}

    resp = client.post("/api/upload")

    assert resp.status_code == 200
    assert resp.json()["status"] == "partial"
    assert resp.json()["total_uploaded"] == 50


def test_randomized_listing_is_stable_per_user(client, tmp_path):
    write_bank(tmp_path, "Academic_Test_10th_Arts.json", make_questions(10))
    client.post("/api/upload")

    params = {"class_level": "10", "user": "student@example.com", "test_id": "arts", "limit": 5}
    first = client.get("/api/assessments", params=params).json()
    second = client.get("/api/assessments", params=params).json()

    assert first == second
    assert len(first) == 5
    for q in first:
        assert q["options"][q["correct_answer"]] == "second"


def test_store_error_maps_to_502(client, store):
    def broken(**kwargs):
        from assessment_upload.store import StoreError
        raise StoreError("down")

    store.fetch = broken
    resp = client.get("/api/assessments")
    assert resp.status_code == 502


def _preflight(api, origin):
    with TestClient(api) as c:
        return c.options(
            "/api/levels",
            headers={"Origin": origin, "Access-Control-Request-Method": "GET"},
        )


def test_cors_allows_only_configured_origins():
    api = FastAPI()
    api.get("/api/levels")(list_levels)
    configure_cors(api, Settings(cors_origins=("https://quiz.example.com",)))

    allowed = _preflight(api, "https://quiz.example.com")
    assert allowed.headers.get("access-control-allow-origin") == "https://quiz.example.com"

    denied = _preflight(api, "http://localhost:5173")
    assert "access-control-allow-origin" not in denied.headers


def test_cors_off_without_configured_origins():
    api = FastAPI()
    api.get("/api/levels")(list_levels)
    configure_cors(api, Settings())

    resp = _preflight(api, "https://quiz.example.com")
    assert "access-control-allow-origin" not in resp.headers
