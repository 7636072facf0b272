"""
Test configuration and fixtures for Brewlog.

Implements the transaction rollback pattern:
- Session-scoped engine (PostgreSQL via TEST_DATABASE_URL, else in-memory SQLite)
- Function-scoped transactional session with automatic rollback
- TestClient with database dependency override
- Authenticated client fixtures
"""

import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from brewlog.config import settings
from brewlog.database import Base, get_db
from brewlog.main import app
from brewlog.models import User, Session as UserSession
from tests.factories import create_session, create_user


# =============================================================================
# Database Fixtures
# =============================================================================


def get_test_database_url() -> str:
    """
    Get the test database URL.

    TEST_DATABASE_URL selects a real database (PostgreSQL in CI). Without
    it, tests run against a private in-memory SQLite database.
    """
    return os.environ.get("TEST_DATABASE_URL", "sqlite://")


@pytest.fixture(scope="session")
def test_engine():
    """
    Create test database engine once per session.

    Tables are created at the start and dropped at the end.
    """
    database_url = get_test_database_url()

    if database_url.startswith("sqlite"):
        # One shared connection so every thread (TestClient) sees the same data
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(database_url)

    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(test_engine) -> Generator[Session, None, None]:
    """
    Provide a transactional database session that rolls back after each test.

    Services call commit(); the session joins the outer transaction, so those
    commits never reach the database and the final rollback discards them.
    """
    connection = test_engine.connect()
    transaction = connection.begin()

    TestingSessionLocal = sessionmaker(bind=connection)
    session = TestingSessionLocal()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


# =============================================================================
# TestClient Fixtures
# =============================================================================


def _override_get_db(db: Session):
    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close - managed by db fixture

    return override_get_db


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    """Unauthenticated TestClient with database dependency override."""
    app.dependency_overrides[get_db] = _override_get_db(db)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Authentication Fixtures
# =============================================================================


@pytest.fixture
def test_user(db: Session) -> User:
    """Create a test user."""
    return create_user(db, email="testuser@example.com", password="testpassword123")


@pytest.fixture
def other_user(db: Session) -> User:
    """A second user, for ownership checks."""
    return create_user(db, email="otheruser@example.com")


@pytest.fixture
def test_session(db: Session, test_user: User) -> UserSession:
    """Create a test session for the test user."""
    return create_session(db, test_user)


@pytest.fixture
def auth_client(
    db: Session, test_session: UserSession
) -> Generator[TestClient, None, None]:
    """
    Authenticated TestClient for the test user.

    Creates a separate TestClient instance to avoid cookie conflicts.
    """
    app.dependency_overrides[get_db] = _override_get_db(db)

    with TestClient(app) as test_client:
        test_client.cookies.set(settings.session_cookie_name, test_session.token)
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# pytest markers
# =============================================================================


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
