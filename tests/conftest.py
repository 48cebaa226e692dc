"""
Shared pytest fixtures.

Uses a SQLite file database so no Postgres is required for tests.
DATABASE_URL is set before the app is imported so the module-level engine
never tries to reach Postgres.
"""
import os

SQLITE_URL = "sqlite:///./test_interpret_reflect.db"
os.environ.setdefault("DATABASE_URL", SQLITE_URL)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from interpret_reflect.db.base import Base, get_db
from interpret_reflect.main import app
from interpret_reflect.services.pattern_engine import PatternStateRegistry, get_pattern_registry
import interpret_reflect.models  # noqa: F401  (registers every table on Base.metadata)

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


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def registry():
    return PatternStateRegistry()


@pytest.fixture()
def client(db, registry):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_pattern_registry] = lambda: registry
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
