"""
Review Pydantic Schemas

Schemas:
- ReviewCreate: Rating plus text for a new review
- ReviewUpdate: Partial update of rating and/or text
- ReviewResponse: Full review data with the reviewer's username
- ReviewMutationResponse: Confirmation message wrapping a review

Business Rules:
- Rating must be 1-5 (validated here and again in the reviews service)
- Review text may not be empty
- One review per user per book (reviews service + database constraint)
"""

from datetime import datetime

from pydantic import Field, field_validator

from bookreview.schemas.base import CamelModel
from bookreview.schemas.user import ReviewerResponse


def strip_review_text(v: str | None) -> str | None:
    """Strip whitespace; blank text is rejected."""
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Review text cannot be empty")
    return v


class ReviewCreate(CamelModel):
    """
    Schema for creating a new review.

    Example request body:
    {
        "rating": 5,
        "reviewText": "One of the best books I've ever read..."
    }
    """

    rating: int = Field(
        ...,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
        examples=[4, 5],
    )
    review_text: str = Field(
        ...,
        min_length=1,
        max_length=5000,
        description="Review text content",
        examples=["This book changed my perspective on..."],
    )

    @field_validator("review_text")
    @classmethod
    def review_text_must_not_be_blank(cls, v):
        return strip_review_text(v)


class ReviewUpdate(CamelModel):
    """
    Schema for updating an existing review.

    Both fields are optional, but the reviews service rejects an update
    that carries neither.
    """

    rating: int | None = Field(
        default=None,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
    )
    review_text: str | None = Field(
        default=None,
        max_length=5000,
        description="Review text content",
    )

    @field_validator("review_text")
    @classmethod
    def review_text_must_not_be_blank(cls, v):
        return strip_review_text(v)


class ReviewResponse(CamelModel):
    """Schema for review responses."""

    id: int = Field(..., description="Unique review identifier")
    book_id: int = Field(..., description="ID of the reviewed book")
    user: ReviewerResponse = Field(..., description="User who wrote the review")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5 stars")
    review_text: str = Field(..., description="Review text content")
    created_at: datetime = Field(..., description="When the review was created")
    updated_at: datetime = Field(..., description="When the review was last updated")


class ReviewMutationResponse(CamelModel):
    """Returned after a review is created or updated."""

    message: str = Field(..., examples=["Review added successfully"])
    review: ReviewResponse
