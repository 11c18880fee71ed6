"""
Security Service

Handles password hashing and JWT access tokens.

Security Features:
==================
1. Password hashing with bcrypt (passlib)
2. HS256-signed JWT access tokens carrying the user id
3. Fixed token lifetime (settings.access_token_expire_minutes, 8 hours)

Usage:
    from bookreview.services.security import hash_password, verify_password

    hashed = hash_password("secret123")
    is_valid = verify_password("secret123", hashed)
"""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from bookreview.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# -------------------------------------------------------------------------
# Password Hashing Configuration
# -------------------------------------------------------------------------
# deprecated="auto" upgrades old hashes transparently on verify
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Example:
        >>> hashed = hash_password("secret123")
        >>> hashed.startswith("$2b$")
        True
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a stored bcrypt hash.

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


# -------------------------------------------------------------------------
# JWT Token Configuration
# -------------------------------------------------------------------------
ALGORITHM = "HS256"
TOKEN_TYPE = "access"


def create_access_token(
    user_id: int,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed access token for a user.

    Args:
        user_id: ID stored in the token's "sub" claim
        expires_delta: Override the configured lifetime (tests use this
            to mint already-expired tokens)

    Returns:
        Encoded JWT token string

    Example:
        >>> token = create_access_token(42)
        >>> token.count(".") == 2  # header.payload.signature
        True
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    to_encode = {
        "sub": str(user_id),
        "type": TOKEN_TYPE,
        "exp": datetime.now(UTC) + expires_delta,
    }

    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=ALGORITHM,
    )


def decode_access_token(token: str) -> dict | None:
    """
    Decode and validate an access token.

    Signature, expiry and token type are all checked.

    Returns:
        Decoded payload if valid, None if invalid, expired or not an
        access token
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
        )
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        return None

    if payload.get("type") != TOKEN_TYPE:
        logger.warning("Token type mismatch: expected access token")
        return None

    return payload


def get_token_user_id(token: str) -> int | None:
    """
    Return the user id carried by a valid access token.

    Returns:
        The integer user id, or None if the token is unusable
    """
    payload = decode_access_token(token)
    if payload is None:
        return None

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError):
        logger.warning("Token subject is not a user id")
        return None
