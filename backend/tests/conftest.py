"""Pytest configuration and fixtures."""

import os

# Settings are read at import time, so the environment has to be in place first.
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

from collections.abc import Generator  # noqa: E402
from datetime import timedelta  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from auth import create_access_token, hash_password  # noqa: E402
from database import get_db  # noqa: E402
from main import app  # noqa: E402
from models import User  # noqa: E402

# In-memory SQLite shared by every connection of the test engine
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    SQLModel.metadata.create_all(test_engine)

    with Session(test_engine) as session:
        yield session

    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, Any, None]:
    """Create a test client bound to the test database session."""

    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def make_user(db_session: Session, username: str, password: str = "secret") -> User:
    user = User(username=username, password=hash_password(password))
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def bearer(user: User) -> dict[str, str]:
    token = create_access_token({"sub": user.username}, expires_delta=timedelta(minutes=5))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(db_session: Session) -> User:
    return make_user(db_session, "alice")


@pytest.fixture
def bob(db_session: Session) -> User:
    return make_user(db_session, "bob")


@pytest.fixture
def alice_headers(alice: User) -> dict[str, str]:
    return bearer(alice)


@pytest.fixture
def bob_headers(bob: User) -> dict[str, str]:
    return bearer(bob)
