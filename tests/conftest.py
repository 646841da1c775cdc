"""
Shared pytest fixtures.

Uses a throwaway SQLite file so the suite never touches a real dogcare.db.
The background refresher is disabled; tests drive refreshes explicitly.
"""
import os

os.environ["DATABASE_URL"] = "sqlite:///./test_dogcare.db"
os.environ["REFRESH_INTERVAL_SECONDS"] = "0"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from dogcare.db.base import Base, get_db  # noqa: E402
from dogcare.main import app  # noqa: E402
from dogcare.models.kv_entry import KeyValueEntry  # noqa: E402
from dogcare.services.store import InMemoryStore  # noqa: E402
from dogcare.services.tracker import Tracker  # noqa: E402

SQLITE_URL = "sqlite:///./test_dogcare.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(autouse=True)
def clean_store():
    """The store is one global mapping: start every test empty."""
    db = TestingSessionLocal()
    try:
        db.query(KeyValueEntry).delete()
        db.commit()
    finally:
        db.close()
    yield


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def store():
    return InMemoryStore()


@pytest.fixture()
def tracker(store):
    return Tracker(store)
