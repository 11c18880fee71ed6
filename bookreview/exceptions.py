"""
Domain Errors

Services raise these instead of HTTPException so the business rules stay
independent of the web layer. Each error knows the HTTP status it maps to;
the handlers registered in main.py render every error as

    {"message": "<human readable text>"}

Taxonomy:
- ValidationFailed, DuplicateReview, EmailAlreadyRegistered,
  InvalidCredentials -> 400
- NotAuthenticated -> 401
- Forbidden -> 403
- NotFound -> 404
"""

from fastapi import status


class BookReviewError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(BookReviewError):
    """Input has the wrong shape or is out of range."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class DuplicateReview(BookReviewError):
    """The user already holds a review for this book."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "You have already reviewed this book."


class EmailAlreadyRegistered(BookReviewError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Email already registered"


class InvalidCredentials(BookReviewError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid credentials"


class NotAuthenticated(BookReviewError):
    """No usable bearer token on the request."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized, no token"


class Forbidden(BookReviewError):
    """Authenticated, but not allowed to do this."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(BookReviewError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


def format_validation_errors(errors) -> str:
    """
    Turn Pydantic/FastAPI validation errors into one readable sentence.

    Only the first error is reported, prefixed with the offending field:
        [{"loc": ("body", "rating"), "msg": "Input should be less than or
        equal to 5", ...}] -> "rating: Input should be less than or equal to 5"
    """
    if not errors:
        return ValidationFailed.default_message

    error = errors[0]
    ctx_error = (error.get("ctx") or {}).get("error")
    message = str(ctx_error) if ctx_error is not None else error.get("msg", "")

    location = [
        str(part) for part in error.get("loc", ())
        if part not in ("body", "query", "path", "header", "cookie", "form")
    ]
    if location:
        return f"{'.'.join(location)}: {message}"
    return message
