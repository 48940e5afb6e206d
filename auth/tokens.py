"""
auth/tokens.py -- Signed access token issuance and verification.

Security design decisions:
  JWT: python-jose with HS256. Tokens carry the username (sub), role, issue
       time (iat) and expiry (exp) as integer epoch seconds. Verification
       returns None on any failure -- the access dependencies turn that into
       a 401.

  Key ownership: TokenCodec receives the signing key at construction. There
       is no module-level key; the application lifespan builds one codec from
       Settings and stores it on app.state. Rotating the key means building a
       new codec, which invalidates every token the old key signed. That is
       the accepted trade-off for having no revocation list.

  Expiry: checked here against the caller-supplied `now` rather than inside
       python-jose, so tests and callers control the clock explicitly. Clock
       skew is not compensated.

  Canonical encoding: base64url leaves spare bits in the last character of a
       segment whose length is not a multiple of three bytes. Decoders ignore
       those bits, so two different strings can carry the same signature.
       Every segment must re-encode to exactly the characters presented --
       a token is accepted only in the form this codec issued it.

Layer rule: no imports from api/ or books/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from jose import JWTError, jwt
from jose.utils import base64url_decode, base64url_encode

from auth.models import Claims, Role

logger = logging.getLogger("bookshelf.auth")

_ALGORITHM = "HS256"
DEFAULT_TTL_SECONDS = 24 * 60 * 60

# Expiry is enforced by TokenCodec.verify() against its own `now`.
_DECODE_OPTIONS = {"verify_exp": False, "verify_aud": False}


def _utc(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        # Naive datetime -- assume UTC
        return now.replace(tzinfo=timezone.utc)
    return now


def _is_canonical(token: str) -> bool:
    """Return True if the token is three base64url segments in canonical form."""
    segments = token.split(".")
    if len(segments) != 3:
        return False
    try:
        for segment in segments:
            raw = segment.encode("ascii")
            if base64url_encode(base64url_decode(raw)) != raw:
                return False
    except ValueError:
        # binascii.Error and UnicodeEncodeError are both ValueError subclasses
        return False
    return True


class TokenCodec:
    """Issues and verifies HS256 access tokens with a fixed lifetime.

    Usage:
        codec = TokenCodec(settings.secret_key, ttl_seconds=settings.token_expire_seconds)
        token = codec.issue("alice", Role.USER)
        claims = codec.verify(token)   # Claims or None
    """

    def __init__(self, secret_key: str, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> None:
        if not secret_key:
            raise ValueError("TokenCodec requires a non-empty secret key.")
        if ttl_seconds <= 0:
            raise ValueError("Token lifetime must be positive.")
        self._secret_key = secret_key
        self.ttl_seconds = ttl_seconds

    def __repr__(self) -> str:
        # Never render the key
        return f"TokenCodec(ttl_seconds={self.ttl_seconds})"

    def issue(self, subject: str, role: Role, now: datetime | None = None) -> str:
        """Encode a signed token for `subject` valid for ttl_seconds from `now`."""
        issued_at = int(_utc(now).timestamp())
        payload = {
            "sub": subject,
            "role": Role(role).value,
            "iat": issued_at,
            "exp": issued_at + self.ttl_seconds,
        }
        return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)

    def verify(self, token: str, now: datetime | None = None) -> Claims | None:
        """Decode and verify a token. Returns Claims, or None on any failure.

        Failure cases: malformed or non-canonical string, bad signature, wrong
        algorithm, missing or mistyped claims, unknown role, and now > exp.
        Returning None (rather than raising) keeps the caller simple: any
        invalid token is treated as unauthenticated.
        """
        if not isinstance(token, str) or not _is_canonical(token):
            return None
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[_ALGORITHM], options=_DECODE_OPTIONS)
        except JWTError:
            return None

        subject = payload.get("sub")
        issued_at = payload.get("iat")
        expires_at = payload.get("exp")
        if not isinstance(subject, str) or not subject:
            return None
        if not isinstance(issued_at, int) or not isinstance(expires_at, int):
            return None
        try:
            role = Role(payload.get("role"))
        except ValueError:
            return None

        expiry = datetime.fromtimestamp(expires_at, tz=timezone.utc)
        if _utc(now) > expiry:
            logger.debug("Token rejected: expired at %s", expiry.isoformat())
            return None

        return Claims(
            subject=subject,
            role=role,
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc),
            expires_at=expiry,
        )
