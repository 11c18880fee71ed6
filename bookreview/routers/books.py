"""
Books Router

Catalog endpoints:
- GET /books - List all books
- GET /books/{book_id} - A book with its reviews
- POST /books - Upload a new book with a cover image (admin only)
"""

import logging

from fastapi import APIRouter, File, Form, UploadFile, status
from pydantic import ValidationError

from bookreview.dependencies import AdminUser, DbSession, ImageStore
from bookreview.exceptions import ValidationFailed, format_validation_errors
from bookreview.schemas import (
    BookCreate,
    BookDetailResponse,
    BookResponse,
    ReviewResponse,
)
from bookreview.services import books as catalog

logger = logging.getLogger(__name__)

# =============================================================================
# Router Configuration
# =============================================================================
router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"description": "Book not found"},
    },
)


# =============================================================================
# Endpoints
# =============================================================================
@router.get(
    "",
    response_model=list[BookResponse],
    summary="List books",
    description="Get every book in the catalog with its average rating.",
)
def list_books(db: DbSession) -> list[BookResponse]:
    """Return all books."""
    return [BookResponse.model_validate(book) for book in catalog.list_books(db)]


@router.get(
    "/{book_id}",
    response_model=BookDetailResponse,
    summary="Get a book by ID",
    description="Retrieve a book together with its reviews and the reviewers' usernames.",
)
def get_book(book_id: int, db: DbSession) -> BookDetailResponse:
    """
    Get a single book with its reviews.

    Raises:
        NotFound: 404 if the book does not exist
    """
    book, reviews = catalog.get_book_with_reviews(db, book_id)

    return BookDetailResponse(
        book=BookResponse.model_validate(book),
        reviews=[ReviewResponse.model_validate(review) for review in reviews],
    )


@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
    description="""
    Upload a book as multipart form data (title, author, description, image).

    Requires an administrator token.
    """,
)
def create_book(
    db: DbSession,
    admin: AdminUser,
    storage: ImageStore,
    title: str = Form(default=""),
    author: str = Form(default=""),
    description: str = Form(default=""),
    image: UploadFile | None = File(default=None),
) -> BookResponse:
    """
    Store the cover image, then create the book.

    Raises:
        ValidationFailed: 400 if the image is missing or metadata is blank
    """
    if image is None or not image.filename:
        raise ValidationFailed("Book image is required")

    try:
        book_data = BookCreate(title=title, author=author, description=description)
    except ValidationError as exc:
        raise ValidationFailed(format_validation_errors(exc.errors()))

    image_url = storage.save(
        image.file.read(),
        filename=image.filename,
        content_type=image.content_type,
    )

    book = catalog.create_book(db, book_data, image_url)

    logger.info(f"Admin {admin.id} created book {book.id}")

    return BookResponse.model_validate(book)
