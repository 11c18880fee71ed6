"""
Book Model

The reviewable catalog entity. Books are created by administrators with an
uploaded cover image; after that the only field that changes is
average_rating, and only through the rating aggregator
(bookreview.services.ratings).
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookreview.database import Base

if TYPE_CHECKING:
    from bookreview.models.review import Review


class Book(Base):
    """
    Book model representing books in the catalog.

    Table: books

    Fields:
    - title, author, description: Catalog metadata (all required)
    - image: Public URL of the uploaded cover image
    - average_rating: Mean of the book's review ratings, 0 without reviews

    Relationships:
    - reviews: One-to-Many (deleting a book deletes its reviews)

    Example:
        book = Book(
            title="1984",
            author="George Orwell",
            description="A dystopian novel set in a totalitarian society.",
            image="/media/3f2a9c.jpg",
        )
    """

    __tablename__ = "books"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Catalog Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Book title"
    )

    author: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Author name as displayed"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Book description or summary"
    )

    image: Mapped[str] = mapped_column(
        String(1000),
        nullable=False,
        comment="URL of the cover image"
    )

    # -------------------------------------------------------------------------
    # Denormalized Rating
    # -------------------------------------------------------------------------
    # Float (not Numeric) so the stored value is the exact mean
    average_rating: Mapped[float] = mapped_column(
        Float,
        default=0.0,
        nullable=False,
        index=True,
        comment="Mean review rating (0-5), 0 if no reviews"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="book",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint(
            "average_rating >= 0 AND average_rating <= 5",
            name="ck_book_average_rating_range",
        ),
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', average_rating={self.average_rating})"
