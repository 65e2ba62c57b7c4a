"""Pytest configuration and fixtures."""

import os

# Fast hashing and no on-disk database while testing; must be set before app imports.
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base, get_db  # noqa: E402
from app.models.task import Task  # noqa: E402, F401
from app.models.token import PersonalAccessToken  # noqa: E402, F401
from app.models.user import User  # noqa: E402, F401
from app.services.auth import AuthService  # noqa: E402
from app.services.tokens import TokenService  # noqa: E402


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="client")
def client_fixture(db_session: Session):
    """Create a test client with the DB dependency pointed at the test session."""
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _make_user(db_session: Session, name: str, email: str, password: str = "password123") -> dict:
    user = AuthService().register(db_session, name, email, password)
    token = TokenService().issue(db_session, user, "auth_token")
    return {
        "user_id": user.id,
        "name": user.name,
        "email": user.email,
        "password": password,
        "token": token,
        "headers": {"Authorization": f"Bearer {token}"},
    }


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session):
    """Create a test user and return its data plus a bearer token."""
    return _make_user(db_session, "Test User", "test@example.com")


@pytest.fixture(name="other_user")
def other_user_fixture(db_session: Session):
    """A second user that owns nothing of test_user's."""
    return _make_user(db_session, "Other User", "other@example.com")
