"""
Book Pydantic Schemas

Book creation arrives as multipart form data (metadata plus an image
file); the router collects the form fields into BookCreate before
handing them to the catalog service.
"""

from pydantic import Field, field_validator

from bookreview.schemas.base import CamelModel
from bookreview.schemas.review import ReviewResponse


class BookCreate(CamelModel):
    """
    Metadata for a new book. The cover image travels separately as a file.

    All three fields are required and may not be blank.
    """

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Book title",
        examples=["1984"],
    )
    author: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Author name",
        examples=["George Orwell"],
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=5000,
        description="Book description or summary",
        examples=["A dystopian novel set in a totalitarian society..."],
    )

    @field_validator("title", "author", "description")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        """Validate and normalize text fields."""
        if not v.strip():
            raise ValueError("Field cannot be empty or whitespace")
        return v.strip()


class BookResponse(CamelModel):
    """
    Schema for book responses.

    average_rating is derived from the book's reviews and read-only.
    """

    id: int = Field(..., description="Unique book identifier")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Author name")
    description: str = Field(..., description="Book description")
    image: str = Field(..., description="Cover image URL")
    average_rating: float = Field(
        ...,
        ge=0,
        le=5,
        description="Mean review rating (0 means no reviews)",
    )


class BookDetailResponse(CamelModel):
    """A book together with all of its reviews."""

    book: BookResponse
    reviews: list[ReviewResponse] = Field(
        default_factory=list,
        description="Reviews for this book, newest first",
    )
