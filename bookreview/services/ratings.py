"""
Ratings Service

Keeps the denormalized Book.average_rating in sync with the book's reviews.

The average is recomputed from the full review set (SQL AVG) every time a
review is created, updated or deleted, before the triggering request
returns. A book without reviews has an average of 0.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookreview.models import Book, Review

logger = logging.getLogger(__name__)


def calculate_average_rating(db: Session, book_id: int) -> float:
    """
    Mean rating over all current reviews of a book, or 0.0 if none.

    Args:
        db: Database session
        book_id: ID of the book

    Returns:
        The exact arithmetic mean as a float
    """
    stmt = select(func.avg(Review.rating)).where(Review.book_id == book_id)
    avg_rating = db.execute(stmt).scalar()

    return float(avg_rating) if avg_rating is not None else 0.0


def recalculate_book_rating(db: Session, book_id: int) -> float:
    """
    Recalculate and store a book's average rating.

    Called after any review create/update/delete operation.

    Args:
        db: Database session
        book_id: ID of the book to update

    Returns:
        The new average rating (0.0 when the book has no reviews or no
        longer exists)

    Note:
        This function commits the changes to the database.
    """
    average = calculate_average_rating(db, book_id)

    book = db.get(Book, book_id)
    if book is None:
        logger.warning(f"Rating recalculation skipped: book {book_id} not found")
        return 0.0

    book.average_rating = average
    db.commit()

    logger.info(f"Book {book_id} average rating is now {average:.2f}")
    return average


def recalculate_all_book_ratings(db: Session) -> int:
    """
    Recalculate the average rating of every book.

    Useful after bulk imports or to repair drift.

    Returns:
        Number of books updated
    """
    book_ids = db.execute(select(Book.id)).scalars().all()

    for book_id in book_ids:
        recalculate_book_rating(db, book_id)

    return len(book_ids)
