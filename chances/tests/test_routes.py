"""
Tests for the chances HTTP routes.
"""

from contextlib import contextmanager
from datetime import datetime
from types import SimpleNamespace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from db import get_db
from models.models_user import User
from chances.models import StudentSchool
from chances.ai.llm_client import LLMClient
from chances.routes import router, get_llm_client
from utils.auth_utils import create_token


@pytest.fixture
def llm_holder():
    return {"llm": None}


@pytest.fixture
def client(session_factory, seeded, llm_holder):
    app = FastAPI()
    app.include_router(router)

    @contextmanager
    def override_get_db():
        db = session_factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_llm_client] = lambda: llm_holder["llm"]
    return TestClient(app)


@pytest.fixture
def auth():
    return {"Authorization": f"Bearer {create_token('user-1')}"}


def test_requires_bearer_token(client):
    assert client.post("/api/chances", json={"schoolId": "school-elite"}).status_code == 401
    bad = client.post("/api/chances", json={"schoolId": "school-elite"}, headers={"Authorization": "Bearer nope"})
    assert bad.status_code == 401


def test_calculate_chances(client, auth, llm_holder, fake_llm, assessment_payload, db):
    llm_holder["llm"] = fake_llm(objects=[assessment_payload(probability=27.6)])

    response = client.post("/api/chances", json={"schoolId": "school-elite"}, headers=auth)

    assert response.status_code == 200
    body = response.json()
    assert body["probability"] == 28
    assert body["tier"] == "reach"
    assert body["schoolId"] == "school-elite"
    assert body["confidenceReason"] == "Complete data available"
    db.expire_all()
    assert db.get(User, "user-1").chances_used == 1


def test_invalid_body_is_400(client, auth, llm_holder, fake_llm):
    llm_holder["llm"] = fake_llm()
    assert client.post("/api/chances", json={"schoolId": "school-elite", "mode": "someday"},
                       headers=auth).status_code == 400
    assert client.post("/api/chances", json={}, headers=auth).status_code == 400


def test_unknown_school_is_404(client, auth, llm_holder, fake_llm):
    llm_holder["llm"] = fake_llm()
    response = client.post("/api/chances", json={"schoolId": "no-such-school"}, headers=auth)
    assert response.status_code == 404


def test_assessment_failure_is_retryable_503(client, auth, llm_holder, fake_llm, db):
    llm_holder["llm"] = fake_llm(objects=[RuntimeError("overloaded")])

    response = client.post("/api/chances", json={"schoolId": "school-elite"}, headers=auth)

    assert response.status_code == 503
    assert response.json()["retryable"] is True
    db.expire_all()
    assert db.get(User, "user-1").chances_used == 0


def test_usage_limit_is_403(client, auth, llm_holder, fake_llm, db):
    llm_holder["llm"] = fake_llm()
    user = db.get(User, "user-1")
    user.chances_used = 3
    user.usage_period_start = datetime.utcnow()
    db.commit()

    response = client.post("/api/chances", json={"schoolId": "school-elite"}, headers=auth)
    assert response.status_code == 403


def test_usage_endpoint(client, auth):
    response = client.get("/api/chances/usage", headers=auth)
    assert response.status_code == 200
    assert response.json()["tier"] == "free"
    assert response.json()["remaining"] == 3


def test_user_without_profile_is_401(client, db, llm_holder, fake_llm):
    llm_holder["llm"] = fake_llm()
    db.add(User(id="user-2", email="new@example.com"))
    db.commit()
    headers = {"Authorization": f"Bearer {create_token('user-2')}"}

    response = client.post("/api/chances", json={"schoolId": "school-elite"}, headers=headers)
    assert response.status_code == 401


def test_batch(client, auth, llm_holder, fake_llm, assessment_payload):
    llm_holder["llm"] = fake_llm(objects=[assessment_payload(probability=12), assessment_payload(probability=66)])

    response = client.post("/api/chances/batch", json={"schoolIds": ["school-elite", "school-state"]}, headers=auth)

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert body["results"]["school-state"]["probability"] == 66


def test_refresh_persists_chances(client, auth, llm_holder, fake_llm, assessment_payload, db):
    llm_holder["llm"] = fake_llm(objects=[assessment_payload(probability=12), assessment_payload(probability=66)])

    response = client.post("/api/chances/refresh", json={"strategy": "holistic"}, headers=auth)

    assert response.status_code == 200
    assert response.json() == {"updated": 2, "total": 2}
    db.expire_all()
    assert db.get(StudentSchool, "list-2").calculated_chance == pytest.approx(0.66)


def test_health(client):
    assert client.get("/api/chances/health").json()["status"] == "ok"


def test_legacy_without_llm_client_degrades_to_quantitative(client, auth, db):
    response = client.post("/api/chances", json={"schoolId": "school-state", "strategy": "legacy"}, headers=auth)

    assert response.status_code == 200
    body = response.json()
    assert body["probability"] == 80
    assert body["confidence"] == "low"
    assert body["improvements"] == []
    db.expire_all()
    assert db.get(User, "user-1").chances_used == 1


def test_holistic_without_llm_client_is_503(client, auth, db):
    response = client.post("/api/chances", json={"schoolId": "school-elite"}, headers=auth)

    assert response.status_code == 503
    assert response.json()["detail"]["retryable"] is False
    db.expire_all()
    assert db.get(User, "user-1").chances_used == 0


def test_compare(client, auth, llm_holder, fake_llm, assessment_payload):
    llm_holder["llm"] = fake_llm(objects=[assessment_payload(probability=22), assessment_payload(probability=31)])

    response = client.post("/api/chances", json={"schoolId": "school-elite", "compare": True}, headers=auth)

    assert response.status_code == 200
    body = response.json()
    assert body["probability"] == 31
    assert body["comparison"]["currentProbability"] == 22


@pytest.mark.parametrize("body", [
    {"schoolId": "school-elite", "compare": True, "strategy": "legacy"},
    {"schoolId": "school-elite", "compare": True, "mode": "current"},
])
def test_compare_rejects_options_it_would_ignore(client, auth, llm_holder, fake_llm, body):
    llm_holder["llm"] = fake_llm()
    assert client.post("/api/chances", json=body, headers=auth).status_code == 400


def test_llm_client_is_created_once_per_app(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace()))

    first = get_llm_client(request)

    assert isinstance(first, LLMClient)
    assert get_llm_client(request) is first


def test_llm_client_is_none_without_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace()))

    assert get_llm_client(request) is None
