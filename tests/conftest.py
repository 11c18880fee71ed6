"""
pytest Fixtures for Book Review API Tests

Every test gets its own in-memory SQLite database, an application built
around it, and a temporary directory for uploaded images.

FIXTURE SCOPES:
- function (default) for everything: each test starts from empty tables
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# Set environment variables BEFORE importing the app: settings are read
# once and cached.
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from bookreview.database import Database, get_db
from bookreview.main import create_app
from bookreview.models import Book, Review, User
from bookreview.services.images import LocalImageStorage
from bookreview.services.ratings import recalculate_book_rating
from bookreview.services.security import hash_password


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
# StaticPool keeps the single in-memory connection alive; without it the
# database would disappear between connections.

@pytest.fixture
def database() -> Generator[Database, None, None]:
    """A fresh in-memory database with all tables created."""
    db = Database(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db.create_tables()

    yield db

    db.drop_tables()
    db.dispose()


@pytest.fixture
def db_session(database: Database) -> Generator[Session, None, None]:
    """Session shared by the test body and the requests it makes."""
    session = database.session()

    yield session

    session.close()


@pytest.fixture
def image_storage(tmp_path: Path) -> LocalImageStorage:
    """Image storage writing into a per-test temporary directory."""
    return LocalImageStorage(tmp_path / "media", "/media", max_bytes=64 * 1024)


@pytest.fixture
def app(database: Database, image_storage: LocalImageStorage) -> FastAPI:
    return create_app(database=database, image_storage=image_storage)


@pytest.fixture
def client(app: FastAPI, db_session: Session) -> Generator[TestClient, None, None]:
    """
    Test client whose requests use the test session.

    get_db is overridden so the test body and the API see the same
    session and identity map.
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client
        # Release the connection before shutdown disposes the engine
        db_session.close()

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

def make_user(
    db_session: Session,
    username: str,
    email: str,
    password: str = "secret123",
    is_admin: bool = False,
) -> User:
    user = User(
        username=username,
        email=email,
        hashed_password=hash_password(password),
        is_admin=is_admin,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def make_book(db_session: Session, title: str = "1984", author: str = "George Orwell") -> Book:
    book = Book(
        title=title,
        author=author,
        description=f"Description of {title}.",
        image=f"/media/{title.lower().replace(' ', '-')}.jpg",
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def sample_user(db_session: Session) -> User:
    """A regular user."""
    return make_user(db_session, "reader", "reader@example.com")


@pytest.fixture
def second_user(db_session: Session) -> User:
    """Another regular user, for ownership scenarios."""
    return make_user(db_session, "other", "other@example.com", password="other-pass")


@pytest.fixture
def admin_user(db_session: Session) -> User:
    """An administrator."""
    return make_user(db_session, "admin", "admin@example.com", password="admin-pass", is_admin=True)


@pytest.fixture
def sample_book(db_session: Session) -> Book:
    return make_book(db_session)


@pytest.fixture
def sample_review(db_session: Session, sample_book: Book, sample_user: User) -> Review:
    """A 4-star review by sample_user, with the book's average updated."""
    review = Review(
        book_id=sample_book.id,
        user_id=sample_user.id,
        rating=4,
        review_text="Unsettling and brilliant.",
    )
    db_session.add(review)
    db_session.commit()
    db_session.refresh(review)
    recalculate_book_rating(db_session, sample_book.id)
    return review
