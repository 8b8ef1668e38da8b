"""Shared fixtures: an in-memory database per test and an app built around it."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from noitro.core.config import Settings
from noitro.core.storage import ObjectStorage
from noitro.db.session import Database
from noitro.main import create_app
from noitro.modules.posts.schemas.post import PostCreate
from noitro.modules.posts.services.post import create_post

@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL="sqlite://",
        SECRET_KEY="test-secret",
        REQUIRE_SESSION_TOKEN=True,
        UPLOAD_DIRECTORY=str(tmp_path / "uploads"),
        S3_ENDPOINT="",
        S3_ACCESS_KEY_ID="",
        S3_SECRET_ACCESS_KEY="",
        S3_PUBLIC_URL="https://cdn.example.com",
        ENVIRONMENT="test",
    )

@pytest.fixture
def database():
    database = Database("sqlite://")
    database.create_all()
    yield database
    database.drop_all()
    database.dispose()

@pytest.fixture
def db(database):
    session = database.session()
    yield session
    session.close()

@pytest.fixture
def s3_client():
    return MagicMock()

@pytest.fixture
def app(settings, database, s3_client):
    return create_app(
        settings=settings,
        database=database,
        object_storage=ObjectStorage(settings, client=s3_client),
    )

@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client

@pytest.fixture
def identity(client):
    """A freshly issued anonymous identity: {"user": ..., "token": ...}"""
    response = client.post("/api/anonymous", json={})
    assert response.status_code == 201
    return response.json()

@pytest.fixture
def other_identity(client):
    response = client.post("/api/anonymous", json={"nickname": "Cô Hạnh Ngọt"})
    assert response.status_code == 201
    return response.json()

@pytest.fixture
def make_post(db):
    """Create posts directly through the store."""
    def _make_post(author_id="author-1", **fields):
        data = {
            "title": "Canh chua cá lóc",
            "content": "Nấu canh chua cá lóc thật ngon cho cả nhà.",
            "category": "cooking",
        }
        data.update(fields)
        return create_post(db, PostCreate(**data), author_id)
    return _make_post
