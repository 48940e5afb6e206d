"""
core/outcomes.py -- Typed result values for expected authentication and
ownership failures.

Login, registration, and book operations return an Outcome instead of raising.
Callers check `outcome.ok` before touching `outcome.value`; the route layer
turns a failed Outcome into an HTTP error using the status and message carried
by its ErrorKind. Nothing branches on error message text.

Unified kinds:
  INVALID_CREDENTIALS covers both "no such user" and "wrong password".
  NOT_FOUND_OR_NOT_OWNED covers both "no such book" and "someone else's book".
  PRINCIPAL_NOT_FOUND (valid token, deleted user) renders exactly like
  UNAUTHORIZED.

Layer rule: core/ is the kernel. No imports from api/, auth/, or books/.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    USERNAME_TAKEN = "username_taken"
    INVALID_CREDENTIALS = "invalid_credentials"
    NOT_FOUND_OR_NOT_OWNED = "not_found"
    PRINCIPAL_NOT_FOUND = "principal_not_found"

    @property
    def status_code(self) -> int:
        return _STATUS[self]

    @property
    def code(self) -> str:
        """Client-facing error code. A deleted principal looks like any other 401."""
        if self is ErrorKind.PRINCIPAL_NOT_FOUND:
            return ErrorKind.UNAUTHORIZED.value
        return self.value

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_STATUS: dict[ErrorKind, int] = {
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.USERNAME_TAKEN: 400,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.NOT_FOUND_OR_NOT_OWNED: 404,
    ErrorKind.PRINCIPAL_NOT_FOUND: 401,
}

_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.UNAUTHORIZED: "Authentication required.",
    ErrorKind.FORBIDDEN: "Insufficient permissions.",
    ErrorKind.USERNAME_TAKEN: "Username already exists.",
    ErrorKind.INVALID_CREDENTIALS: "Invalid username or password.",
    ErrorKind.NOT_FOUND_OR_NOT_OWNED: "Book not found.",
    ErrorKind.PRINCIPAL_NOT_FOUND: "Authentication required.",
}


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a success carrying `value` or a failure carrying `error`."""

    value: Optional[T] = None
    error: Optional[ErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorKind) -> "Outcome[T]":
        return cls(error=error)
