"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication and
role gating.

Per request, get_identity():
  1. Reads "Authorization: Bearer <token>". Missing header, another scheme,
     or an empty credential -> HTTP 401. No handler runs.
  2. Verifies the token with the TokenCodec on app.state. Invalid or expired
     -> HTTP 401.
  3. Attaches Identity(subject, role) to request.state.identity.

require_roles(*roles) wraps get_identity() with a role gate. The route
declares the set of roles that may pass; an empty set means "any
authenticated caller". A role outside the set -> HTTP 403.

Terminal states are exactly one of: handler invoked, 401, 403.

Layer rule: no imports from api/ or books/.
  auth/dependencies.py may import from fastapi (for HTTPException/Request)
  because this module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from fastapi import Depends, HTTPException, Request

from auth.models import Identity, Role
from auth.tokens import TokenCodec
from core.outcomes import ErrorKind

logger = logging.getLogger("bookshelf.auth")


def _safe_subject(subject: str) -> str:
    """Return a deterministic non-reversible token for log correlation."""
    return "sub-" + hashlib.sha256(subject.encode("utf-8")).hexdigest()[:12]


def _reject(kind: ErrorKind) -> HTTPException:
    return HTTPException(
        status_code=kind.status_code,
        detail={"code": kind.code, "message": kind.message, "detail": None},
    )


def _bearer_token(request: Request) -> str | None:
    """Return the bearer credential, or None if the header is absent or malformed."""
    auth_header = request.headers.get("Authorization", "")
    scheme, _, credential = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    credential = credential.strip()
    return credential or None


def get_identity(request: Request) -> Identity:
    """Require a valid bearer token. Raises HTTP 401 otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(identity: Identity = Depends(get_identity)): ...
    """
    token = _bearer_token(request)
    if token is None:
        logger.warning(
            "auth.rejected method=%s path=%s reason=invalid_or_missing_bearer",
            request.method,
            request.url.path,
        )
        raise _reject(ErrorKind.UNAUTHORIZED)

    codec: TokenCodec = request.app.state.token_codec
    claims = codec.verify(token, datetime.now(timezone.utc))
    if claims is None:
        logger.warning(
            "auth.rejected method=%s path=%s reason=token_verification_failed",
            request.method,
            request.url.path,
        )
        raise _reject(ErrorKind.UNAUTHORIZED)

    identity = Identity(subject=claims.subject, role=claims.role)
    request.state.identity = identity
    logger.debug(
        "auth.accepted method=%s path=%s subject=%s role=%s",
        request.method,
        request.url.path,
        _safe_subject(identity.subject),
        identity.role.value,
    )
    return identity


def require_roles(*roles: Role) -> Callable[..., Identity]:
    """Build a dependency that admits only identities whose role is in `roles`.

    Use as a FastAPI dependency:
        @router.get("/admin-only")
        def route(identity: Identity = Depends(require_roles(Role.ADMIN))): ...

    require_roles() with no arguments admits any authenticated identity.
    """
    allowed = frozenset(Role(r) for r in roles)

    def dependency(request: Request, identity: Identity = Depends(get_identity)) -> Identity:
        if allowed and identity.role not in allowed:
            logger.warning(
                "auth.forbidden method=%s path=%s subject=%s role=%s",
                request.method,
                request.url.path,
                _safe_subject(identity.subject),
                identity.role.value,
            )
            raise _reject(ErrorKind.FORBIDDEN)
        return identity

    return dependency
