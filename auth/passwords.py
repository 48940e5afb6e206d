"""
auth/passwords.py -- Password hashing and verification.

Passwords: bcrypt directly (no passlib wrapper). Bcrypt is the right choice for
low-entropy secrets because its cost factor makes brute-force expensive, and
every hash embeds its own random salt -- hashing the same password twice gives
two different digests. Never compare digests with ==; always call
verify_password().

Using bcrypt directly rather than passlib[bcrypt] because passlib's internal
wrap-bug detection creates a password longer than 72 bytes, which bcrypt 4.x
rejects with an explicit error.

Layer rule: no imports from api/ or books/.
"""

from __future__ import annotations

import bcrypt


def hash_password(plain: str) -> str:
    """Return a bcrypt hash of the given plaintext password.

    bcrypt reads at most 72 bytes of input; bcrypt 5.x raises ValueError for
    anything longer. The API layer rejects passwords over 72 UTF-8 bytes
    before they reach this function.

    Errors from the salt generator propagate -- a hash without fresh entropy
    must never be stored.
    """
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    A malformed hash (wrong prefix, truncated, not bcrypt at all) is a
    mismatch, not an error. So is a digest that is not a string at all, such
    as None from a damaged row.
    """
    if not isinstance(plain, str) or not isinstance(hashed, str):
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


# Timing equalization dummy hash.
# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones. auth.authenticator verifies against this hash
# when the username does not exist.
DUMMY_HASH: str = hash_password("bookshelf_timing_dummy")
