"""
Authentication Router

Handles account endpoints:
- Registration (username/email/password)
- Login (email/password -> bearer token + profile)

Security:
=========
- Passwords are hashed with bcrypt before storage
- Tokens are HS256 JWTs valid for 8 hours
- Registration is rate limited per client IP
"""

import logging

from fastapi import APIRouter, Request, status

from bookreview.config import get_settings
from bookreview.dependencies import DbSession
from bookreview.schemas.user import (
    LoginRequest,
    TokenResponse,
    UserCreate,
    UserResponse,
)
from bookreview.services import accounts
from bookreview.services.rate_limiter import REGISTER_LIMIT_MESSAGE, limiter

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    tags=["Authentication"],
    responses={
        400: {"description": "Invalid input, duplicate email or bad credentials"},
    },
)


# -------------------------------------------------------------------------
# Registration Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="""
    Create a new user account.

    The email must be valid and not already registered. The password is
    never echoed back.
    """,
)
@limiter.limit(settings.rate_limit_register, error_message=REGISTER_LIMIT_MESSAGE)
def register(
    request: Request,
    user_data: UserCreate,
    db: DbSession,
) -> UserResponse:
    """Register a new user with email and password."""
    user = accounts.register_user(db, user_data)
    return UserResponse.model_validate(user)


# -------------------------------------------------------------------------
# Login Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login with email and password",
    description="""
    Authenticate with email and password.

    **Usage:**
    Include the returned token in the Authorization header:
    ```
    Authorization: Bearer <token>
    ```
    """,
)
def login(
    credentials: LoginRequest,
    db: DbSession,
) -> TokenResponse:
    """Authenticate user and return a bearer token with the profile."""
    token, user = accounts.login(db, credentials.email, credentials.password)

    return TokenResponse(
        token=token,
        user=UserResponse.model_validate(user),
    )
