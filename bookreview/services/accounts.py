"""
Accounts Service

Registration and credential checks.

Security:
=========
- Passwords are hashed with bcrypt before storage
- Plain text passwords are never logged or stored
- Login failures do not reveal whether the email exists
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookreview.exceptions import EmailAlreadyRegistered, InvalidCredentials
from bookreview.models import User
from bookreview.schemas.user import UserCreate
from bookreview.services.security import (
    create_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> User | None:
    """Look a user up by email, ignoring case."""
    stmt = select(User).where(func.lower(User.email) == email.lower())
    return db.execute(stmt).scalar_one_or_none()


def register_user(db: Session, user_data: UserCreate) -> User:
    """
    Register a new (non-admin) user.

    1. Checks the email is not already registered
    2. Hashes the password with bcrypt
    3. Creates the user record

    Raises:
        EmailAlreadyRegistered: If the email is taken (also raised when a
            concurrent registration wins the unique index)
    """
    if get_user_by_email(db, user_data.email) is not None:
        raise EmailAlreadyRegistered()

    user = User(
        username=user_data.username,
        email=user_data.email.lower(),
        hashed_password=hash_password(user_data.password),
        is_admin=False,
    )

    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise EmailAlreadyRegistered()
    db.refresh(user)

    logger.info(f"New user registered: {user.email}")

    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """
    Return the user whose email and password match.

    Raises:
        InvalidCredentials: Unknown email or wrong password
    """
    user = get_user_by_email(db, email)

    if user is None:
        logger.warning(f"Login failed: user not found for {email}")
        raise InvalidCredentials()

    if not verify_password(password, user.hashed_password):
        logger.warning(f"Login failed: incorrect password for {email}")
        raise InvalidCredentials()

    return user


def login(db: Session, email: str, password: str) -> tuple[str, User]:
    """
    Authenticate and issue a bearer token.

    Returns:
        Tuple of (access_token, user)
    """
    user = authenticate(db, email, password)
    token = create_access_token(user.id)

    logger.info(f"User logged in: {user.email}")

    return token, user
