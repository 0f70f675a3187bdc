"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from src.api.dependencies import get_image_provider, get_text_provider
from src.database import Base, get_db
from src.main import app
from src.models.user import User
from src.services.exceptions import ProviderError


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


class FakeProvider:
    """Provider double that echoes the prompt or fails on demand."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        self.calls: list[str] = []
        self.error: Exception | None = None

    async def generate(self, prompt: str) -> str:
        self.calls.append(prompt)
        if self.error is not None:
            raise self.error
        return f"{self.prefix}{prompt}"

    def fail(self, message: str = "Hugging Face API responded with 503: loading") -> None:
        self.error = ProviderError("Generation provider request failed", message)


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/genspace", "/genspace_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def text_provider(client):
    """Replace the text provider with a fake."""
    provider = FakeProvider("generated: ")
    app.dependency_overrides[get_text_provider] = lambda: provider
    return provider


@pytest.fixture
def image_provider(client):
    """Replace the image provider with a fake returning data URIs."""
    provider = FakeProvider("data:image/png;base64,")
    app.dependency_overrides[get_image_provider] = lambda: provider
    return provider


def register(client, email: str, name: str) -> AuthHeaders:
    response = client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": "testpass123", "name": name},
    )
    assert response.status_code == 201
    data = response.json()
    return AuthHeaders(
        {"Authorization": f"Bearer {data['access_token']}"},
        user_id=data["user"]["id"],
        email=email,
    )


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return register(client, "test@example.com", "Test User")


@pytest.fixture
def other_auth_headers(client):
    """Create a second, unrelated user."""
    return register(client, "other@example.com", "Other User")


@pytest.fixture
def users(db):
    """Two users created directly in the database for service tests."""
    owner = User(email="owner@example.com", name="Owner", password_hash="fake")
    stranger = User(email="stranger@example.com", name="Stranger", password_hash="fake")
    db.add_all([owner, stranger])
    db.commit()
    return {"owner": owner, "stranger": stranger}
