"""
Pytest configuration and fixtures

MongoDB is replaced by mongomock and the LLM by FakeLLMClient, both
through FastAPI dependency overrides.
"""
import json
import os
import tempfile

# Settings are read on first use, so set test values before importing the app
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ["LLM_API_KEY"] = ""
os.environ["STORAGE_DIR"] = tempfile.mkdtemp(prefix="weinds-storage-")

import mongomock
import pytest
from fastapi.testclient import TestClient

from weinds.core.config import get_settings
from weinds.db.mongodb import get_mongo_db, init_mongo_indexes
from weinds.main import app
from weinds.services.llm_client import LLMClient, get_llm_client


class FakeLLMClient:
    """
    Stands in for LLMClient. Replies are queued with add_reply() and
    returned in order; every call is recorded.
    """

    extract_json = staticmethod(LLMClient.extract_json)

    def __init__(self):
        self.replies = []
        self.calls = []

    def add_reply(self, reply):
        self.replies.append(reply if isinstance(reply, str) else json.dumps(reply))

    def call_api(self, system_prompt, user_content, max_tokens=1000, flow="chat"):
        self.calls.append({"flow": flow, "system_prompt": system_prompt, "user_content": user_content})
        if not self.replies:
            raise AssertionError(f"No fake LLM reply queued for flow {flow}")
        return self.replies.pop(0)


def make_skill_test_questions(count=20):
    """15 multiple-choice + 5 short-answer questions, as the model would return them."""
    questions = []
    for i in range(count):
        if i < 15:
            questions.append({
                "question_text": f"MC question {i + 1}?",
                "question_type": "multiple-choice",
                "options": ["A", "B", "C", "D"],
                "correct_answer": "B",
                "topic": "Python",
                "difficulty": ["easy", "intermediate", "hard"][i % 3]
            })
        else:
            questions.append({
                "question_text": f"Short question {i + 1}?",
                "question_type": "short-answer",
                "correct_answer": "An answer",
                "topic": "SQL",
                "difficulty": "hard"
            })
    return {"questions": questions}


PIPELINE_FULL = {
    "application": True,
    "invite": True,
    "skill_test": "ai",
    "ai_interview": True,
    "final_interview": "online"
}

PIPELINE_MINIMAL = {"application": True, "skill_test": "traditional"}


@pytest.fixture(autouse=True)
def storage_dir(tmp_path, monkeypatch):
    """Each test writes uploads to its own directory."""
    monkeypatch.setenv("STORAGE_DIR", str(tmp_path / "storage"))
    get_settings.cache_clear()
    yield tmp_path / "storage"
    get_settings.cache_clear()


@pytest.fixture
def db():
    database = mongomock.MongoClient()["weinds_test"]
    init_mongo_indexes(database)
    return database


@pytest.fixture
def fake_llm():
    return FakeLLMClient()


@pytest.fixture
def client(db, fake_llm):
    """Test client with database and LLM dependency overrides"""
    app.dependency_overrides[get_mongo_db] = lambda: db
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """
    Register and log in a user; returns (headers, user_id).

        headers, user_id = register("employer", "hr@acme.com")
    """
    def _register(role, email, password="password123", full_name=None):
        body = {"email": email, "password": password, "role": role}
        if full_name:
            body["full_name"] = full_name
        response = client.post("/api/auth/register", json=body)
        assert response.status_code == 201, response.text
        response = client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        data = response.json()
        return {"Authorization": f"Bearer {data['access_token']}"}, data["user_id"]
    return _register


@pytest.fixture
def employer(client, register):
    headers, user_id = register("employer", "hr@acme.com", full_name="Hiring Manager")
    response = client.put("/api/employers/profile", json={"company_name": "Acme Corp"}, headers=headers)
    assert response.status_code == 200, response.text
    return headers, user_id


@pytest.fixture
def candidate(client, register):
    headers, user_id = register("candidate", "asha@example.com", full_name="Asha Rao")
    response = client.put(
        "/api/candidates/profile",
        json={"full_name": "Asha Rao", "skills": "Python, SQL, FastAPI", "headline": "Backend developer"},
        headers=headers
    )
    assert response.status_code == 200, response.text
    return headers, user_id


@pytest.fixture
def create_post(client, employer):
    def _create(post_type="job", pipeline=None, **details):
        body = {
            "post_type": post_type,
            "title": "Backend Engineer",
            "responsibilities": "1. Build APIs\n2. Write tests",
            "skills": "Python, SQL, Docker",
            "location": "Bengaluru",
            "work_mode": "Hybrid",
            "pipeline": pipeline or PIPELINE_FULL
        }
        body.update(details)
        response = client.post("/api/posts", json=body, headers=employer[0])
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def set_status(client, employer):
    """Move an application along as the employer."""
    def _set(application_id, *statuses):
        for status in statuses:
            response = client.put(
                f"/api/applications/{application_id}/status", json={"status": status}, headers=employer[0]
            )
            assert response.status_code == 200, response.text
        return response.json()
    return _set
