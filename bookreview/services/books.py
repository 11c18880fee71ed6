"""
Book Catalog Service

Read access to the catalog for everyone, and book creation for
administrators. Books never get their average_rating from here; that
field belongs to the ratings service.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from bookreview.exceptions import NotFound
from bookreview.models import Book, Review
from bookreview.schemas.book import BookCreate

logger = logging.getLogger(__name__)


def list_books(db: Session) -> list[Book]:
    """Return every book, oldest first."""
    stmt = select(Book).order_by(Book.id)
    return list(db.execute(stmt).scalars().all())


def get_book_or_404(db: Session, book_id: int) -> Book:
    """
    Get a book by ID.

    Raises:
        NotFound: If no book has that ID
    """
    book = db.get(Book, book_id)

    if book is None:
        raise NotFound("Book not found")

    return book


def get_book_with_reviews(db: Session, book_id: int) -> tuple[Book, list[Review]]:
    """
    A book and all of its reviews, newest first, reviewers eagerly loaded.

    Raises:
        NotFound: If no book has that ID
    """
    book = get_book_or_404(db, book_id)

    stmt = (
        select(Review)
        .options(selectinload(Review.user))
        .where(Review.book_id == book_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    reviews = list(db.execute(stmt).scalars().all())

    return book, reviews


def create_book(db: Session, book_data: BookCreate, image_url: str) -> Book:
    """
    Create a book with a zero average rating.

    Args:
        db: Database session
        book_data: Validated title/author/description
        image_url: URL of the already stored cover image
    """
    book = Book(
        title=book_data.title,
        author=book_data.author,
        description=book_data.description,
        image=image_url,
        average_rating=0.0,
    )

    db.add(book)
    db.commit()
    db.refresh(book)

    logger.info(f"Created book {book.id}: '{book.title}'")

    return book
