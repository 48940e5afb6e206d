"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in books/models.py -- dataclasses own domain shape; stores and services do the
work.

Layer rule: no imports from api/ or books/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    """Closed set of principal roles. Route gates check membership, never strings."""

    USER = "USER"
    ADMIN = "ADMIN"


@dataclass
class User:
    """A registered principal.

    username is unique and never changes after creation. hashed_password is a
    bcrypt digest and must never leave the server -- API response models copy
    only the public fields.

    id is None before the record is written to the database.
    """

    username: str
    hashed_password: str
    role: Role = Role.USER
    id: int | None = None
    created_at: str | None = None  # ISO 8601, set by store on insert


@dataclass(frozen=True)
class Claims:
    """Verified contents of a token. Only TokenCodec.verify() builds these."""

    subject: str
    role: Role
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class Identity:
    """Request-scoped caller identity attached by the access dependencies."""

    subject: str
    role: Role
