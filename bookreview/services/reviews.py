"""
Reviews Service

Review ownership rules and the review lifecycle.

Business Rules:
- Rating must be an integer 1-5 and text may not be empty
- A user holds at most one review per book; a second one is rejected.
  The (user_id, book_id) unique constraint backs this up when two
  requests race past the existence check.
- Only the author may update a review; update needs rating or text
- The author or an administrator may delete a review
- Every create/update/delete recomputes the book's average rating
  before returning
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from bookreview.exceptions import DuplicateReview, Forbidden, NotFound, ValidationFailed
from bookreview.models import Review, User
from bookreview.services.books import get_book_or_404
from bookreview.services.ratings import recalculate_book_rating

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


# =============================================================================
# Validation Helpers
# =============================================================================
def validate_rating(rating) -> int:
    """
    Check a rating is a whole number in [1, 5].

    Raises:
        ValidationFailed: Otherwise
    """
    # bool is an int subclass; True is not a rating
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationFailed("Rating must be a whole number between 1 and 5.")
    if rating < MIN_RATING or rating > MAX_RATING:
        raise ValidationFailed("Rating must be between 1 and 5.")
    return rating


def validate_review_text(review_text: str | None) -> str:
    """Strip the text and reject it when nothing is left."""
    if review_text is None or not review_text.strip():
        raise ValidationFailed("Review text cannot be empty.")
    return review_text.strip()


# =============================================================================
# Lookups
# =============================================================================
def get_review_or_404(db: Session, review_id: int) -> Review:
    """Get a review by ID with its author loaded, or raise NotFound."""
    stmt = (
        select(Review)
        .options(selectinload(Review.user))
        .where(Review.id == review_id)
    )
    review = db.execute(stmt).scalar_one_or_none()

    if review is None:
        raise NotFound("Review not found.")
    return review


def find_user_review(db: Session, user_id: int, book_id: int) -> Review | None:
    """The review a user wrote for a book, if any."""
    stmt = select(Review).where(
        Review.user_id == user_id,
        Review.book_id == book_id,
    )
    return db.execute(stmt).scalar_one_or_none()


# =============================================================================
# Lifecycle
# =============================================================================
def create_review(
    db: Session,
    user: User,
    book_id: int,
    rating: int,
    review_text: str,
) -> Review:
    """
    Create the user's review of a book.

    Raises:
        ValidationFailed: Rating out of range or empty text
        NotFound: The book does not exist
        DuplicateReview: The user already reviewed this book
    """
    rating = validate_rating(rating)
    review_text = validate_review_text(review_text)

    get_book_or_404(db, book_id)

    if find_user_review(db, user.id, book_id) is not None:
        raise DuplicateReview()

    review = Review(
        user_id=user.id,
        book_id=book_id,
        rating=rating,
        review_text=review_text,
    )

    db.add(review)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if find_user_review(db, user.id, book_id) is not None:
            logger.warning(
                f"Concurrent duplicate review rejected: user {user.id}, book {book_id}"
            )
            raise DuplicateReview()
        raise
    db.refresh(review)

    logger.info(f"User {user.id} reviewed book {book_id} ({rating}/5)")

    recalculate_book_rating(db, book_id)

    return get_review_or_404(db, review.id)


def update_review(
    db: Session,
    user: User,
    review_id: int,
    rating: int | None = None,
    review_text: str | None = None,
) -> Review:
    """
    Update the rating and/or text of the user's own review.

    Raises:
        ValidationFailed: Neither field given, rating out of range, or
            empty text
        NotFound: The review does not exist
        Forbidden: The user is not the review's author
    """
    if rating is None and review_text is None:
        raise ValidationFailed(
            "At least one of rating or reviewText is required for update."
        )
    if rating is not None:
        rating = validate_rating(rating)
    if review_text is not None:
        review_text = validate_review_text(review_text)

    review = get_review_or_404(db, review_id)

    if review.user_id != user.id:
        raise Forbidden("You are not authorized to update this review.")

    if rating is not None:
        review.rating = rating
    if review_text is not None:
        review.review_text = review_text

    db.commit()

    logger.info(f"User {user.id} updated review {review_id}")

    recalculate_book_rating(db, review.book_id)

    return get_review_or_404(db, review_id)


def delete_review(db: Session, user: User, review_id: int) -> int:
    """
    Delete a review as its author or as an administrator.

    Returns:
        ID of the book the review belonged to

    Raises:
        NotFound: The review does not exist
        Forbidden: The user is neither the author nor an administrator
    """
    review = get_review_or_404(db, review_id)

    if review.user_id != user.id and not user.is_admin:
        raise Forbidden("You are not authorized to delete this review.")

    book_id = review.book_id

    db.delete(review)
    db.commit()

    logger.info(f"User {user.id} deleted review {review_id} of book {book_id}")

    recalculate_book_rating(db, book_id)

    return book_id
