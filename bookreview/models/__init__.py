"""
SQLAlchemy Models Package

Database models for the Book Review API.

Model Relationships:
- User 1 -> N Review
- Book 1 -> N Review
- User <-> Book: Many-to-Many through Review, at most one review per pair

Importing this package registers every model with Base.metadata, which
Database.create_tables() and Alembic rely on.
"""

from bookreview.models.user import User
from bookreview.models.book import Book
from bookreview.models.review import Review

__all__ = [
    "User",
    "Book",
    "Review",
]
