"""
API request and response models for Bookshelf REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
books/models.py, which own the internal domain representation. Route handlers
map between the two.

Response models list their fields explicitly: hashed_password and owner ids
never appear in any of them.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auth.models import Role

# bcrypt only reads the first 72 bytes of a password, and bcrypt 5.x rejects
# longer input outright.
PASSWORD_MAX_LENGTH = 72


# ---------------------------------------------------------------------------
# Auth -- request models
# ---------------------------------------------------------------------------


class CredentialRequest(BaseModel):
    """Request body for POST /auth/register and POST /auth/login.

    Never persisted. Whitespace is not stripped: "alice " and "alice" are
    different usernames and a password is used exactly as typed.
    """

    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=PASSWORD_MAX_LENGTH)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        # max_length counts characters; non-ASCII characters take several bytes.
        if len(v.encode("utf-8")) > PASSWORD_MAX_LENGTH:
            raise ValueError(f"password must be at most {PASSWORD_MAX_LENGTH} bytes")
        return v


# ---------------------------------------------------------------------------
# Auth -- response models
# ---------------------------------------------------------------------------


class RegisterResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str
    message: str = "User created"


class LoginResponse(BaseModel):
    """Response body for a successful login. token is opaque to clients."""

    model_config = ConfigDict(frozen=True)

    username: str
    token: str
    token_type: str = "bearer"
    expires_in: int


class MeResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str
    role: Role


class UserResponse(BaseModel):
    """One row in the admin user listing."""

    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    role: Role
    created_at: str


# ---------------------------------------------------------------------------
# Books
# ---------------------------------------------------------------------------


class BookRequest(BaseModel):
    """Request body for POST /books and PUT /books/{book_id}.

    There is deliberately no owner field: ownership comes from the token.
    Unknown fields (e.g. a forged "owner_id") are ignored.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)
    author: str = Field(min_length=1, max_length=255)


class BookResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    author: str


# ---------------------------------------------------------------------------
# Errors and health
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
