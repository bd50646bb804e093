from __future__ import annotations

import os
import pathlib
import sys

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Keep the application engine off the filesystem during tests
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")

import models  # noqa: E402,F401  # Ensure models are registered with metadata
import database  # noqa: E402
from database import Base  # noqa: E402
from main import app  # noqa: E402
from schemas import UserRegister  # noqa: E402
import services  # noqa: E402


@pytest.fixture()
def engine():
    # Fresh in-memory database per test
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture()
def db_session(engine):
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session: Session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[database.get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db_session):
    def _make_user(username: str = "alice", password: str = "s3cret-pass"):
        return services.create_user(db_session, UserRegister(username=username, password=password))

    return _make_user


@pytest.fixture()
def auth_headers(client):
    def _auth_headers(username: str = "alice", password: str = "s3cret-pass") -> dict:
        client.post("/signup", json={"username": username, "password": password})
        response = client.post("/login", json={"username": username, "password": password})
        assert response.status_code == 200
        return {"Authorization": response.json()["token"]}

    return _auth_headers
