from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from taskmaster import models  # noqa: F401
from taskmaster.core.config import get_settings
from taskmaster.core.database import Base, get_db
from taskmaster.main import app
from taskmaster.services import auth_service
from taskmaster.utils.datetime import utcnow


@pytest.fixture
def engine():
    """In-memory SQLite shared across connections for one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client, db):
    auth_service.create_user(db, username="muhsina", pin="4466", name="Muhsina", email="muhsina@example.com")
    db.commit()
    response = client.post("/api/v1/auth/login", json={"username": "muhsina", "pin": "4466"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def settings_env(monkeypatch):
    """Set TASKMASTER_* variables for one test and reload settings."""

    def apply(**values):
        for key, value in values.items():
            monkeypatch.setenv(f"TASKMASTER_{key.upper()}", str(value))
        get_settings.cache_clear()

    yield apply
    get_settings.cache_clear()


@pytest.fixture
def make_student(client, auth_headers):
    def create(**fields):
        body = {"name": "Alice Johnson", "email": "alice@uni.edu", "phone": "555-0101", "university": "Oxford"}
        body.update(fields)
        response = client.post("/api/v1/students", json=body, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return create


@pytest.fixture
def make_writer(client, auth_headers):
    def create(**fields):
        body = {"name": "Dr. Expert", "contact": "919876543210", "specialty": "Law"}
        body.update(fields)
        response = client.post("/api/v1/writers", json=body, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return create


@pytest.fixture
def make_assignment(client, auth_headers):
    def create(student_id, **fields):
        body = {
            "student_id": student_id,
            "title": "International Law Essay",
            "subject": "Law",
            "level": "Masters",
            "deadline": (utcnow() + timedelta(days=3)).isoformat(),
        }
        body.update(fields)
        response = client.post("/api/v1/assignments", json=body, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return create
