"""Shared FastAPI dependencies for API routes."""

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy.orm import Session

from recruit_tracker.db.session import SessionLocal, get_db  # re-export

__all__ = [
    "get_db",
    "get_session_factory",
]


def get_session_factory() -> Callable[[], Session]:
    """Session factory for services that open one Session per concurrent read.

    Override in tests to point the suggestion trigger at a test database.
    """
    return SessionLocal
