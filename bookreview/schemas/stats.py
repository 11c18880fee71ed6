"""Admin statistics schema."""

from pydantic import Field

from bookreview.schemas.base import CamelModel
from bookreview.schemas.book import BookResponse


class AdminStatsResponse(CamelModel):
    """
    Aggregate counts plus the five best-rated books.

    Example:
    {
        "totalUsers": 12,
        "totalBooks": 30,
        "totalReviews": 87,
        "topBooks": [...]
    }
    """

    total_users: int = Field(..., ge=0)
    total_books: int = Field(..., ge=0)
    total_reviews: int = Field(..., ge=0)
    top_books: list[BookResponse] = Field(
        default_factory=list,
        description="Up to 5 books ordered by average rating, highest first",
    )
