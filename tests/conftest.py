"""
Test configuration and fixtures for BookVerse API tests.
"""
import os

os.environ.setdefault("ENVIRONMENT", "testing")

from typing import Dict, Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from bookverse.core.auth import create_access_token  # noqa: E402
from bookverse.core.database import Base, get_db  # noqa: E402
from bookverse.crud.book import crud_book  # noqa: E402
from bookverse.crud.user import crud_user  # noqa: E402
from bookverse.main import app  # noqa: E402
from bookverse.models.book import Book  # noqa: E402
from bookverse.models.user import User  # noqa: E402
from bookverse.schemas.book import BookCreate  # noqa: E402
from bookverse.schemas.user import UserCreate  # noqa: E402

# Use in-memory SQLite database for testing; foreign keys are switched on by
# the connect listener in bookverse.core.database
TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    echo=False,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session) -> Generator[TestClient, None, None]:
    """Create a test client with database session override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def test_user_data() -> Dict[str, str]:
    return {
        "email": "reader@example.com",
        "password": "secret123",
        "name": "Test Reader",
    }


@pytest.fixture
def test_user(db_session, test_user_data) -> User:
    return crud_user.create(db_session, obj_in=UserCreate(**test_user_data))


@pytest.fixture
def test_user_2(db_session) -> User:
    user_in = UserCreate(email="critic@example.com", password="secret456", name="Second Reader")
    return crud_user.create(db_session, obj_in=user_in)


@pytest.fixture
def user_token(test_user) -> str:
    return create_access_token(test_user.id)


@pytest.fixture
def auth_headers(user_token) -> Dict[str, str]:
    """Authentication headers for the book owner."""
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture
def auth_headers_2(test_user_2) -> Dict[str, str]:
    """Authentication headers for a user who owns nothing."""
    return {"Authorization": f"Bearer {create_access_token(test_user_2.id)}"}


@pytest.fixture
def test_book_data() -> Dict[str, str]:
    return {
        "title": "The Silent Library",
        "author": "Ada Quill",
        "description": "A mystery set among endless shelves.",
        "genre": "Mystery",
        "language": "English",
        "content": " ".join(["word"] * 600),
        "is_public": "true",
    }


@pytest.fixture
def test_book(db_session, test_user, test_book_data) -> Book:
    """A public book uploaded by test_user."""
    return crud_book.create_with_chapters(
        db_session, obj_in=BookCreate(**test_book_data), user_id=test_user.id
    )


@pytest.fixture
def private_book(db_session, test_user, test_book_data) -> Book:
    book_in = BookCreate(**{**test_book_data, "title": "Drafts", "is_public": "false"})
    return crud_book.create_with_chapters(db_session, obj_in=book_in, user_id=test_user.id)


@pytest.fixture
def make_book(db_session, test_user, test_book_data):
    """Factory for extra public books owned by test_user."""

    def _make(**overrides) -> Book:
        book_in = BookCreate(**{**test_book_data, **overrides})
        return crud_book.create_with_chapters(
            db_session, obj_in=book_in, user_id=test_user.id
        )

    return _make
