"""
Fixtures shared by the test layers (pytest picks up conftest.py automatically).

The database is an in-memory SQLite engine. StaticPool keeps a single connection,
so every session sees the same tables.
"""

from typing import Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.schema import Base
from src.db.sql_repository import SQLGameRepository

engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Session on freshly created tables. Dropped again at teardown, so repository tests do not see each other's rows."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def sql_repository(db_session_repo: Session) -> SQLGameRepository:
    return SQLGameRepository(db_session_repo)
