"""
Reviews Router

Review endpoints:
- POST /books/{book_id}/review - Create a review (authenticated)
- PUT /reviews/{review_id} - Update a review (author only)
- DELETE /reviews/{review_id} - Delete a review (author or admin)

Business Rules (enforced in bookreview.services.reviews):
- One review per user per book
- Only the review author can update their review
- Only the review author or an administrator can delete a review
- Each change recomputes the book's average rating before responding
"""

from fastapi import APIRouter, Request, status

from bookreview.config import get_settings
from bookreview.dependencies import CurrentUser, DbSession
from bookreview.schemas import (
    MessageResponse,
    ReviewCreate,
    ReviewMutationResponse,
    ReviewResponse,
    ReviewUpdate,
)
from bookreview.services import reviews as review_service
from bookreview.services.rate_limiter import (
    REVIEW_LIMIT_MESSAGE,
    REVIEW_LIMIT_SCOPE,
    get_user_key,
    limiter,
)

settings = get_settings()

# =============================================================================
# Router Configuration
# =============================================================================
router = APIRouter(
    tags=["Reviews"],
    responses={
        404: {"description": "Review or book not found"},
    },
)


@router.post(
    "/books/{book_id}/review",
    response_model=ReviewMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a review",
    description="Review a book. Requires authentication. One review per book per user.",
)
# One budget per user across all books, not one per book URL
@limiter.shared_limit(
    settings.rate_limit_review,
    scope=REVIEW_LIMIT_SCOPE,
    key_func=get_user_key,
    error_message=REVIEW_LIMIT_MESSAGE,
)
def create_review(
    request: Request,
    book_id: int,
    review_data: ReviewCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> ReviewMutationResponse:
    """
    Create a new review for a book.

    Raises:
        ValidationFailed: 400 for an invalid rating or empty text
        DuplicateReview: 400 if the user already reviewed this book
        NotFound: 404 if the book does not exist
    """
    review = review_service.create_review(
        db,
        current_user,
        book_id,
        rating=review_data.rating,
        review_text=review_data.review_text,
    )

    return ReviewMutationResponse(
        message="Review added successfully",
        review=ReviewResponse.model_validate(review),
    )


@router.put(
    "/reviews/{review_id}",
    response_model=ReviewMutationResponse,
    summary="Update a review",
    description="Update your own review's rating and/or text.",
)
def update_review(
    review_id: int,
    review_data: ReviewUpdate,
    db: DbSession,
    current_user: CurrentUser,
) -> ReviewMutationResponse:
    """
    Update an existing review.

    Raises:
        ValidationFailed: 400 if neither field is given or a value is invalid
        NotFound: 404 if the review does not exist
        Forbidden: 403 if the user is not the review author
    """
    review = review_service.update_review(
        db,
        current_user,
        review_id,
        rating=review_data.rating,
        review_text=review_data.review_text,
    )

    return ReviewMutationResponse(
        message="Review updated successfully",
        review=ReviewResponse.model_validate(review),
    )


@router.delete(
    "/reviews/{review_id}",
    response_model=MessageResponse,
    summary="Delete a review",
    description="Delete a review. Only the review author or an administrator can delete.",
)
def delete_review(
    review_id: int,
    db: DbSession,
    current_user: CurrentUser,
) -> MessageResponse:
    """
    Delete a review.

    Raises:
        NotFound: 404 if the review does not exist
        Forbidden: 403 if the user is neither the author nor an administrator
    """
    review_service.delete_review(db, current_user, review_id)
    return MessageResponse(message="Review deleted successfully.")
