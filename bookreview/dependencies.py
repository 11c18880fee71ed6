"""
FastAPI Dependencies Module

Reusable components injected into route handlers with Depends().

Access Policy
=============
Protected routes compose two checks in order:
1. get_current_user - the request carries a valid, unexpired bearer token
   for a known user, otherwise 401
2. get_admin_user - that user is an administrator, otherwise 403

get_admin_user depends on get_current_user, so an unauthenticated
request to an admin route always gets 401, never 403.
"""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from bookreview.database import get_db
from bookreview.exceptions import Forbidden, NotAuthenticated
from bookreview.models import User
from bookreview.services.images import LocalImageStorage
from bookreview.services.security import get_token_user_id

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Route signatures read `db: DbSession` instead of
# `db: Session = Depends(get_db)`.

DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# JWT Authentication
# =============================================================================
# auto_error=False: a missing header reaches get_current_user as None so the
# 401 body uses our own message format.
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    db: DbSession,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    """
    Extract and validate the current user from the bearer token.

    1. Reads "Authorization: Bearer <token>"
    2. Decodes and validates the JWT (signature, expiry, type)
    3. Looks up the user in the database

    Raises:
        NotAuthenticated: 401 if the token is missing, invalid, expired,
            or names a user that no longer exists
    """
    if credentials is None or not credentials.credentials:
        raise NotAuthenticated("Not authorized, no token")

    user_id = get_token_user_id(credentials.credentials)
    if user_id is None:
        raise NotAuthenticated("Not authorized, token failed")

    user = db.get(User, user_id)
    if user is None:
        raise NotAuthenticated("Not authorized, token failed")

    return user


def get_admin_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Verify the current user is an administrator.

    Used by book upload and the stats dashboard.

    Raises:
        Forbidden: 403 if the user is not an administrator
    """
    if not current_user.is_admin:
        raise Forbidden("Admin only")
    return current_user


CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(get_admin_user)]


# =============================================================================
# Image Storage
# =============================================================================
def get_image_storage(request: Request) -> LocalImageStorage:
    """The image storage the application was created with."""
    return request.app.state.image_storage


ImageStore = Annotated[LocalImageStorage, Depends(get_image_storage)]
