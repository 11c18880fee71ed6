"""
User Model

Represents a registered account. Users are created at registration and
never edited afterwards; the only role distinction is the is_admin flag.

SQLAlchemy 2.0 Features Used:
- mapped_column(): Column definitions with full type support
- Mapped[]: Type hint wrapper for SQLAlchemy columns
- relationship(): Link to the user's reviews
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookreview.database import Base

if TYPE_CHECKING:
    from bookreview.models.review import Review


class User(Base):
    """
    User model representing registered users.

    Table: users

    Relationships:
    - reviews: One-to-Many relationship with Review model

    Indexes:
    - Primary key on id (automatic)
    - email: Unique index for login lookups

    Example:
        user = User(
            username="reader",
            email="reader@example.com",
            hashed_password=hash_password("secret123"),
        )
    """

    __tablename__ = "users"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Identity Fields
    # -------------------------------------------------------------------------
    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Display name shown next to reviews"
    )

    # Stored lower-cased; uniqueness is enforced by the index as well as
    # by the registration check
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="User's email address (used for login)"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    # -------------------------------------------------------------------------
    # Role
    # -------------------------------------------------------------------------
    is_admin: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment="Whether the user may upload books, read stats and delete any review"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
        comment="When the user registered"
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        """Developer-friendly string representation."""
        return f"User(id={self.id}, email='{self.email}', username='{self.username}')"
