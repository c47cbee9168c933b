import mongomock
import pytest
from fastapi.testclient import TestClient

import users
from database import create_document, ensure_indexes, get_db
from main import app
from schemas import Project


@pytest.fixture
def db():
    database = mongomock.MongoClient()["devdost_test"]
    ensure_indexes(database)
    return database


@pytest.fixture
def make_user(db):
    def _make(name: str, email: str = None) -> str:
        email = email or f"{name.lower()}@example.com"
        return str(users.upsert_identity_user(db, email, name)["_id"])

    return _make


@pytest.fixture
def make_project(db):
    def _make(owner: str = "system", title: str = "Pair Programming Board", **overrides) -> str:
        fields = {
            "title": title,
            "description": "A shared board for finding pair-programming partners on weekend projects.",
            "techStack": ["Python", "FastAPI"],
            "category": "backend",
            "difficulty": "intermediate",
            "features": ["Boards"],
            "requiredSkills": ["Python"],
            "createdBy": owner,
        }
        extra = {k: overrides.pop(k) for k in ("createdAt",) if k in overrides}
        fields.update(overrides)
        doc = Project(**fields).model_dump()
        doc.update(extra)
        return create_document(db, "project", doc)

    return _make


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(db):
    def _headers(user_id: str) -> dict:
        token = users.create_session(db, user_id)["token"]
        return {"Authorization": f"Bearer {token}"}

    return _headers
