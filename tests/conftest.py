"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import os
import tempfile

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from tests.test_constants import TEST_INTERNAL_JOB_TOKEN, TEST_SECRET_KEY

# Force a throwaway SQLite DB when pytest runs; don't inherit from .env
_test_db_path = os.path.join(tempfile.gettempdir(), "recruit_tracker_test.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"
os.environ.setdefault("SECRET_KEY", TEST_SECRET_KEY)
os.environ.setdefault("INTERNAL_JOB_TOKEN", TEST_INTERNAL_JOB_TOKEN)
os.environ.pop("SUGGESTION_DEAD_PERIODS", None)
os.environ.pop("SUGGESTION_AUTOCOMPLETE_STRICT", None)


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> None:
    """Clear cached settings before and after each test so env patches don't leak."""
    from recruit_tracker.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def db_engine(tmp_path):
    """File-backed SQLite engine with the full schema, one per test."""
    from recruit_tracker import models  # noqa: F401
    from recruit_tracker.db.session import Base

    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Session factory bound to the per-test database (one Session per call)."""
    return sessionmaker(bind=db_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory) -> Session:
    """Database session for service tests."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    from recruit_tracker.main import app

    return TestClient(app)


@pytest.fixture
def client_with_db(session_factory) -> TestClient:
    """TestClient whose session factory and get_db point at the per-test database."""
    from recruit_tracker.api.deps import get_session_factory
    from recruit_tracker.db.session import get_db
    from recruit_tracker.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    c = TestClient(app)
    yield c
    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(get_session_factory, None)
