"""
Pytest fixtures for the profile service tests.

Each test gets a fresh in-memory SQLite database.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-key-with-enough-length-0123")
os.environ.setdefault("PAT_TOKEN", "test-pat-token")

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import core.models  # noqa: F401,E402
from core.db import Base, enable_sqlite_foreign_keys  # noqa: E402
from core.models import User  # noqa: E402


@pytest.fixture(scope="function")
def test_db():
    """Create a fresh test database for each test."""
    db_url = "sqlite://"
    engine = create_engine(
        db_url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    yield db_url, TestingSessionLocal, engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(test_db):
    _, TestingSessionLocal, _ = test_db
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(test_db):
    """Factory inserting a user and returning it detached."""
    _, TestingSessionLocal, _ = test_db
    counter = {"n": 0}

    def _make_user(name: str | None = None) -> User:
        counter["n"] += 1
        n = counter["n"]
        session = TestingSessionLocal()
        try:
            user = User(
                name=name or f"User {n}",
                email=f"user{n}@example.com",
                avatar=f"https://gravatar.com/avatar/{n}",
            )
            session.add(user)
            session.commit()
            session.refresh(user)
            return user
        finally:
            session.close()

    return _make_user
