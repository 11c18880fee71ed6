"""
Admin Statistics Service

Counts of users, books and reviews plus the best-rated books.
"""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookreview.models import Book, Review, User

TOP_BOOKS_LIMIT = 5


def top_rated_books(db: Session, limit: int = TOP_BOOKS_LIMIT) -> list[Book]:
    """Books ordered by average rating, highest first; ties by ID."""
    stmt = (
        select(Book)
        .order_by(Book.average_rating.desc(), Book.id)
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().all())


def get_admin_stats(db: Session) -> dict:
    """
    Aggregate numbers for the admin dashboard.

    Returns:
        dict with total_users, total_books, total_reviews and top_books
    """
    return {
        "total_users": db.execute(select(func.count(User.id))).scalar() or 0,
        "total_books": db.execute(select(func.count(Book.id))).scalar() or 0,
        "total_reviews": db.execute(select(func.count(Review.id))).scalar() or 0,
        "top_books": top_rated_books(db),
    }
