"""
User Pydantic Schemas

Schemas:
- UserCreate: Registration data (username, email, password)
- LoginRequest: Email/password credentials
- UserResponse: Public profile returned by register/login (never the password)
- ReviewerResponse: The slice of a user embedded in reviews
- TokenResponse: Bearer token plus the logged-in user's profile
"""

from pydantic import EmailStr, Field, field_validator

from bookreview.schemas.base import CamelModel


class UserCreate(CamelModel):
    """
    Schema for user registration.

    Example request body:
    {
        "username": "reader",
        "email": "reader@example.com",
        "password": "secret123"
    }
    """

    username: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Display name",
        examples=["reader"],
    )

    email: EmailStr = Field(
        ...,
        description="User's email address (must be unique)",
        examples=["reader@example.com"],
    )

    # bcrypt only looks at the first 72 bytes
    password: str = Field(
        ...,
        min_length=1,
        max_length=72,
        description="Plain text password, hashed before storage",
        examples=["secret123"],
    )

    @field_validator("username")
    @classmethod
    def username_must_not_be_blank(cls, v: str) -> str:
        """Strip surrounding whitespace and reject blank names."""
        v = v.strip()
        if not v:
            raise ValueError("Username cannot be empty")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Emails are compared case-insensitively."""
        return v.lower()


class LoginRequest(CamelModel):
    """Schema for login with email and password."""

    email: EmailStr = Field(
        ...,
        description="Email address used at registration",
        examples=["reader@example.com"],
    )
    password: str = Field(
        ...,
        min_length=1,
        description="Account password",
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserResponse(CamelModel):
    """
    Schema for user responses (what the API returns).

    SECURITY: Never includes the password hash.
    """

    id: int = Field(..., description="Unique user identifier", examples=[1])
    username: str = Field(..., description="Display name")
    email: str = Field(..., description="User's email address")
    is_admin: bool = Field(..., description="Whether the user is an administrator")


class ReviewerResponse(CamelModel):
    """Minimal user info embedded in review responses."""

    id: int = Field(..., description="Unique user identifier")
    username: str = Field(..., description="Display name")


class TokenResponse(CamelModel):
    """
    Schema returned by a successful login.

    Clients send the token back as `Authorization: Bearer <token>`.
    """

    token: str = Field(..., description="Signed bearer token, valid for 8 hours")
    user: UserResponse = Field(..., description="The authenticated user")
