"""
Tests for Books

- GET /api/books: list every book
- GET /api/books/{book_id}: a book with its reviews
- POST /api/books: create a book with a cover image (admin only)
"""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookreview.models import Book, Review, User
from bookreview.services.images import LocalImageStorage
from bookreview.services.security import create_access_token

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


# =============================================================================
# Helper Functions
# =============================================================================


def get_auth_header(user: User) -> dict:
    """Create authorization header for a user."""
    token = create_access_token(user.id)
    return {"Authorization": f"Bearer {token}"}


def book_form(**overrides) -> dict:
    data = {
        "title": "Dune",
        "author": "Frank Herbert",
        "description": "Spice, sand and sandworms.",
    }
    data.update(overrides)
    return data


def count_books(db_session: Session) -> int:
    return db_session.execute(select(func.count(Book.id))).scalar()


# =============================================================================
# List / Get
# =============================================================================


class TestListBooks:
    """Tests for GET /api/books"""

    def test_list_books_empty(self, client: TestClient):
        response = client.get("/api/books")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    def test_list_books(self, client: TestClient, sample_review: Review, sample_book: Book):
        response = client.get("/api/books")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert len(data) == 1
        assert data[0] == {
            "id": sample_book.id,
            "title": "1984",
            "author": "George Orwell",
            "description": "Description of 1984.",
            "image": "/media/1984.jpg",
            "averageRating": 4.0,
        }

    def test_list_books_needs_no_token(self, client: TestClient, sample_book: Book):
        response = client.get("/api/books", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == status.HTTP_200_OK


class TestGetBook:
    """Tests for GET /api/books/{book_id}"""

    def test_get_book_without_reviews(self, client: TestClient, sample_book: Book):
        response = client.get(f"/api/books/{sample_book.id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["book"]["id"] == sample_book.id
        assert data["book"]["averageRating"] == 0
        assert data["reviews"] == []

    def test_get_book_with_reviews(
        self,
        client: TestClient,
        sample_review: Review,
        sample_user: User,
    ):
        response = client.get(f"/api/books/{sample_review.book_id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["book"]["averageRating"] == 4.0
        assert len(data["reviews"]) == 1

        review = data["reviews"][0]
        assert review["id"] == sample_review.id
        assert review["bookId"] == sample_review.book_id
        assert review["rating"] == 4
        assert review["reviewText"] == "Unsettling and brilliant."
        assert review["user"] == {"id": sample_user.id, "username": "reader"}
        assert "email" not in review["user"]
        assert "createdAt" in review
        assert "updatedAt" in review

    def test_get_book_reviews_newest_first(
        self,
        client: TestClient,
        db_session: Session,
        sample_review: Review,
        second_user: User,
    ):
        newer = Review(
            book_id=sample_review.book_id,
            user_id=second_user.id,
            rating=2,
            review_text="Too bleak for me.",
        )
        db_session.add(newer)
        db_session.commit()

        response = client.get(f"/api/books/{sample_review.book_id}")

        ids = [review["id"] for review in response.json()["reviews"]]
        assert ids == [newer.id, sample_review.id]

    def test_get_book_not_found(self, client: TestClient):
        response = client.get("/api/books/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"message": "Book not found"}

    def test_get_book_invalid_id(self, client: TestClient):
        response = client.get("/api/books/not-a-number")

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Create
# =============================================================================


class TestCreateBook:
    """Tests for POST /api/books"""

    def test_create_book_as_admin(
        self,
        client: TestClient,
        db_session: Session,
        admin_user: User,
        image_storage: LocalImageStorage,
    ):
        response = client.post(
            "/api/books",
            data=book_form(),
            files={"image": ("cover.png", PNG_BYTES, "image/png")},
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["title"] == "Dune"
        assert data["author"] == "Frank Herbert"
        assert data["averageRating"] == 0
        assert data["image"].startswith("/media/")
        assert data["image"].endswith(".png")

        stored = image_storage.media_root / data["image"].rsplit("/", 1)[1]
        assert stored.read_bytes() == PNG_BYTES
        assert count_books(db_session) == 1

    def test_uploaded_image_is_served(self, client: TestClient, admin_user: User):
        image_url = client.post(
            "/api/books",
            data=book_form(),
            files={"image": ("cover.png", PNG_BYTES, "image/png")},
            headers=get_auth_header(admin_user),
        ).json()["image"]

        response = client.get(image_url)

        assert response.status_code == status.HTTP_200_OK
        assert response.content == PNG_BYTES

    def test_create_book_strips_fields(self, client: TestClient, admin_user: User):
        response = client.post(
            "/api/books",
            data=book_form(title="  Dune  "),
            files={"image": ("cover.png", PNG_BYTES, "image/png")},
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["title"] == "Dune"

    def test_create_book_without_image(
        self,
        client: TestClient,
        db_session: Session,
        admin_user: User,
    ):
        response = client.post(
            "/api/books",
            data=book_form(),
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"message": "Book image is required"}
        assert count_books(db_session) == 0

    def test_create_book_rejects_non_image(self, client: TestClient, admin_user: User):
        response = client.post(
            "/api/books",
            data=book_form(),
            files={"image": ("notes.txt", b"plain text", "text/plain")},
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"message": "Uploaded file must be an image"}

    def test_create_book_rejects_large_image(self, client: TestClient, admin_user: User):
        response = client.post(
            "/api/books",
            data=book_form(),
            files={"image": ("huge.png", b"\x00" * (64 * 1024 + 1), "image/png")},
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_book_blank_title(
        self,
        client: TestClient,
        db_session: Session,
        admin_user: User,
        image_storage: LocalImageStorage,
    ):
        response = client.post(
            "/api/books",
            data=book_form(title="   "),
            files={"image": ("cover.png", PNG_BYTES, "image/png")},
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"].startswith("title:")
        assert count_books(db_session) == 0
        # Nothing is written for a rejected book
        assert not image_storage.media_root.exists() or not any(
            image_storage.media_root.iterdir()
        )

    def test_create_book_missing_author(self, client: TestClient, admin_user: User):
        form = book_form()
        del form["author"]

        response = client.post(
            "/api/books",
            data=form,
            files={"image": ("cover.png", PNG_BYTES, "image/png")},
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_book_as_regular_user(
        self,
        client: TestClient,
        db_session: Session,
        sample_user: User,
    ):
        response = client.post(
            "/api/books",
            data=book_form(),
            files={"image": ("cover.png", PNG_BYTES, "image/png")},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {"message": "Admin only"}
        assert count_books(db_session) == 0

    def test_create_book_unauthenticated(self, client: TestClient, db_session: Session):
        response = client.post(
            "/api/books",
            data=book_form(),
            files={"image": ("cover.png", PNG_BYTES, "image/png")},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"message": "Not authorized, no token"}
        assert count_books(db_session) == 0
