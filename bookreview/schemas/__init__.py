"""
Pydantic Schemas Package

Request/response validation for the API. Schemas are kept separate from
the SQLAlchemy models so the API controls exactly what is exposed.

Schema Naming Convention:
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Fields allowed when updating (all optional)
- XxxResponse: Fields returned in API responses
"""

from bookreview.schemas.base import CamelModel, MessageResponse
from bookreview.schemas.user import (
    LoginRequest,
    ReviewerResponse,
    TokenResponse,
    UserCreate,
    UserResponse,
)
from bookreview.schemas.review import (
    ReviewCreate,
    ReviewMutationResponse,
    ReviewResponse,
    ReviewUpdate,
)
from bookreview.schemas.book import (
    BookCreate,
    BookDetailResponse,
    BookResponse,
)
from bookreview.schemas.stats import AdminStatsResponse

__all__ = [
    "CamelModel",
    "MessageResponse",
    # User / auth schemas
    "UserCreate",
    "UserResponse",
    "ReviewerResponse",
    "LoginRequest",
    "TokenResponse",
    # Book schemas
    "BookCreate",
    "BookResponse",
    "BookDetailResponse",
    # Review schemas
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "ReviewMutationResponse",
    # Admin
    "AdminStatsResponse",
]
