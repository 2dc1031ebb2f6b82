"""
Fixtures shared by the test modules of several layers (pytest picks up 'conftest.py' automatically).

Nothing touches a database file: the configured database is replaced by in-memory SQLite
before any test module imports src.db.database.
"""

import os
from typing import Generator

import pytest
from sqlalchemy import Engine, StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.schema import Base
from src.db.sql_repository import SQLVcsRepository

os.environ.setdefault("CHECKERS_DATABASE_URL", "sqlite:///:memory:")


def memory_engine() -> Engine:
    """StaticPool: all sessions share one connection, so they all see the same in-memory tables"""
    return create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


engine = memory_engine()
TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Session on a fresh set of tables. Dropped at teardown, so repository tests never see each other's histories."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session_shared() -> Generator[Session, None, None]:
    """Second session on the same tables, like several clients of one database. Leaves the tables in place."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def sql_repository(db_session_repo: Session) -> SQLVcsRepository:
    return SQLVcsRepository(db_session_repo)


@pytest.fixture
def db_session_without_tables() -> Generator[Session, None, None]:
    """A database nobody created the tables for: every query fails."""
    broken_engine = memory_engine()
    db = Session(broken_engine)
    try:
        yield db
    finally:
        db.close()
        broken_engine.dispose()
