"""
auth/authenticator.py -- Registration and password login.

Authenticator is the only code that combines the principal directory
(auth/store.py), the password hasher (auth/passwords.py), and the token codec
(auth/tokens.py). Route handlers call it and translate the returned Outcome
into an HTTP response; they never inline store lookups + verify_password().

Username enumeration [C1]:
  login() returns the same INVALID_CREDENTIALS outcome for an unknown username
  and for a wrong password, and it always runs bcrypt:
  - Unknown username: bcrypt runs against DUMMY_HASH (same cost as real check)
  - Wrong password: bcrypt runs against the real hash (same cost)

  register() returns early for a taken username without hashing, so equal
  timing on registration is best-effort, not a guarantee.

Layer rule: no imports from api/ or books/.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from auth.models import Role, User
from auth.passwords import DUMMY_HASH, hash_password, verify_password
from auth.store import UserStore
from auth.tokens import TokenCodec
from core.outcomes import ErrorKind, Outcome

logger = logging.getLogger("bookshelf.auth")


class Authenticator:
    def __init__(self, store: UserStore, codec: TokenCodec) -> None:
        self._store = store
        self._codec = codec

    def register(self, username: str, password: str) -> Outcome[User]:
        """Create a USER principal. Fails with USERNAME_TAKEN on a duplicate name.

        The IntegrityError branch covers a concurrent registration that won
        the race between exists() and the insert.
        """
        if self._store.exists(username):
            logger.info("Registration rejected: username taken")
            return Outcome.failure(ErrorKind.USERNAME_TAKEN)

        user = User(username=username, hashed_password=hash_password(password), role=Role.USER)
        try:
            user.id = self._store.create_user(user)
        except IntegrityError:
            logger.info("Registration rejected: username taken (concurrent insert)")
            return Outcome.failure(ErrorKind.USERNAME_TAKEN)

        created = self._store.get_by_id(user.id)
        logger.info("Registered user id=%s", user.id)
        return Outcome.success(created)

    def login(self, username: str, password: str) -> Outcome[str]:
        """Verify a credential pair and issue a token. Returns the token on success."""
        user = self._store.get_by_username(username)
        if user is None:
            # Equalize timing -- do NOT return before running bcrypt [C1]
            verify_password(password, DUMMY_HASH)
            logger.warning("Login failed")
            return Outcome.failure(ErrorKind.INVALID_CREDENTIALS)
        if not verify_password(password, user.hashed_password):
            logger.warning("Login failed")
            return Outcome.failure(ErrorKind.INVALID_CREDENTIALS)

        logger.info("Login succeeded for user id=%s", user.id)
        return Outcome.success(self._codec.issue(user.username, user.role))
