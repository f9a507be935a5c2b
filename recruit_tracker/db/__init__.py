"""Database package: engine, session factory and declarative base."""

from recruit_tracker.db.session import Base, SessionLocal, check_db_connection, engine, get_db

__all__ = ["Base", "SessionLocal", "check_db_connection", "engine", "get_db"]
