"""
Tests for Rate Limiting

The suite runs with RATE_LIMIT_ENABLED=false; the fixture here builds an
app from settings with limiting switched on and clears the counters
around each test.

Limits:
- Registration: 10 per hour per client IP
- Review submission: 5 per 15 minutes per user, across all books
"""

from collections.abc import Generator

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookreview.config import get_settings
from bookreview.database import Database, get_db
from bookreview.main import create_app
from bookreview.models import Book, Review, User
from bookreview.services.images import LocalImageStorage
from bookreview.services.rate_limiter import (
    REGISTER_LIMIT_MESSAGE,
    REVIEW_LIMIT_MESSAGE,
    limiter,
)
from bookreview.services.security import create_access_token


# =============================================================================
# Helper Functions
# =============================================================================


def get_auth_header(user: User) -> dict:
    """Create authorization header for a user."""
    token = create_access_token(user.id)
    return {"Authorization": f"Bearer {token}"}


def add_books(db_session: Session, count: int) -> list[Book]:
    books = [
        Book(
            title=f"Book {index}",
            author="Author",
            description="Description",
            image=f"/media/{index}.jpg",
        )
        for index in range(count)
    ]
    db_session.add_all(books)
    db_session.commit()
    return books


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def limited_app(database: Database, image_storage: LocalImageStorage) -> Generator[FastAPI, None, None]:
    """An app built from settings that enable rate limiting."""
    app_settings = get_settings().model_copy(update={"rate_limit_enabled": True})
    limiter.reset()

    yield create_app(
        app_settings=app_settings,
        database=database,
        image_storage=image_storage,
    )

    limiter.enabled = get_settings().rate_limit_enabled
    limiter.reset()


@pytest.fixture
def limited_client(limited_app: FastAPI, db_session: Session) -> Generator[TestClient, None, None]:
    def override_get_db():
        yield db_session

    limited_app.dependency_overrides[get_db] = override_get_db

    with TestClient(limited_app) as test_client:
        yield test_client
        db_session.close()

    limited_app.dependency_overrides.clear()


# =============================================================================
# Tests
# =============================================================================


class TestLimiterSwitch:
    def test_create_app_enables_limiter(self, limited_app: FastAPI):
        assert limited_app.state.limiter is limiter
        assert limiter.enabled is True

    def test_create_app_disables_limiter(self, limited_app: FastAPI, database: Database):
        app_settings = get_settings().model_copy(update={"rate_limit_enabled": False})

        create_app(app_settings=app_settings, database=database)

        assert limiter.enabled is False


class TestRegisterLimit:
    """POST /api/register is limited per client IP."""

    def test_eleventh_registration_is_rejected(self, limited_client: TestClient):
        for index in range(10):
            response = limited_client.post(
                "/api/register",
                json={
                    "username": f"user{index}",
                    "email": f"user{index}@example.com",
                    "password": "secret123",
                },
            )
            assert response.status_code == status.HTTP_201_CREATED

        response = limited_client.post(
            "/api/register",
            json={
                "username": "one-too-many",
                "email": "extra@example.com",
                "password": "secret123",
            },
        )

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.json() == {"message": REGISTER_LIMIT_MESSAGE}
        assert "Retry-After" in response.headers

    def test_other_ip_is_not_limited(self, limited_client: TestClient):
        for index in range(10):
            limited_client.post(
                "/api/register",
                json={
                    "username": f"user{index}",
                    "email": f"user{index}@example.com",
                    "password": "secret123",
                },
                headers={"X-Forwarded-For": "203.0.113.7"},
            )

        response = limited_client.post(
            "/api/register",
            json={
                "username": "neighbour",
                "email": "neighbour@example.com",
                "password": "secret123",
            },
            headers={"X-Forwarded-For": "198.51.100.20"},
        )

        assert response.status_code == status.HTTP_201_CREATED


class TestReviewLimit:
    """POST /api/books/{book_id}/review is limited per user across books."""

    def test_sixth_review_across_books_is_rejected(
        self,
        limited_client: TestClient,
        db_session: Session,
        sample_user: User,
    ):
        books = add_books(db_session, 6)
        headers = get_auth_header(sample_user)

        for book in books[:5]:
            response = limited_client.post(
                f"/api/books/{book.id}/review",
                json={"rating": 4, "reviewText": "Good."},
                headers=headers,
            )
            assert response.status_code == status.HTTP_201_CREATED

        response = limited_client.post(
            f"/api/books/{books[5].id}/review",
            json={"rating": 4, "reviewText": "Good."},
            headers=headers,
        )

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.json() == {"message": REVIEW_LIMIT_MESSAGE}
        assert db_session.execute(select(func.count(Review.id))).scalar() == 5

    def test_limit_is_per_user(
        self,
        limited_client: TestClient,
        db_session: Session,
        sample_user: User,
        second_user: User,
    ):
        books = add_books(db_session, 6)

        for book in books[:5]:
            limited_client.post(
                f"/api/books/{book.id}/review",
                json={"rating": 4, "reviewText": "Good."},
                headers=get_auth_header(sample_user),
            )

        response = limited_client.post(
            f"/api/books/{books[5].id}/review",
            json={"rating": 2, "reviewText": "Not for me."},
            headers=get_auth_header(second_user),
        )

        assert response.status_code == status.HTTP_201_CREATED
