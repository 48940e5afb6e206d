"""
books/service.py -- Ownership-scoped book operations.

Every operation starts from the caller's Identity (attached by
auth.dependencies) and resolves it to a principal by username. A token that
is still valid for a deleted user resolves to nothing and the operation
returns PRINCIPAL_NOT_FOUND, which the route layer renders as a plain 401.

The resolved principal's id is the only owner id that ever reaches the
store. create() takes no owner argument at all, so a client cannot file a book
under another account.

get/update/delete return NOT_FOUND_OR_NOT_OWNED for both a missing id and a
foreign id; the store query already filtered by owner, so there is nothing
else to distinguish them by.
"""

import logging
from typing import Optional

from auth.models import Identity, User
from auth.store import UserStore
from books.models import Book
from books.store import BookStore
from core.outcomes import ErrorKind, Outcome

logger = logging.getLogger("bookshelf.books")


class BookService:
    def __init__(self, users: UserStore, books: BookStore) -> None:
        self._users = users
        self._books = books

    def _resolve_owner(self, identity: Identity) -> Optional[User]:
        owner = self._users.get_by_username(identity.subject)
        if owner is None:
            logger.warning("Token subject no longer resolves to a principal")
        return owner

    def list_owned(self, identity: Identity) -> Outcome[list[Book]]:
        owner = self._resolve_owner(identity)
        if owner is None:
            return Outcome.failure(ErrorKind.PRINCIPAL_NOT_FOUND)
        return Outcome.success(self._books.list_for_owner(owner.id))

    def get(self, identity: Identity, book_id: int) -> Outcome[Book]:
        owner = self._resolve_owner(identity)
        if owner is None:
            return Outcome.failure(ErrorKind.PRINCIPAL_NOT_FOUND)
        book = self._books.get_for_owner(book_id, owner.id)
        if book is None:
            return Outcome.failure(ErrorKind.NOT_FOUND_OR_NOT_OWNED)
        return Outcome.success(book)

    def create(self, identity: Identity, title: str, author: str) -> Outcome[Book]:
        owner = self._resolve_owner(identity)
        if owner is None:
            return Outcome.failure(ErrorKind.PRINCIPAL_NOT_FOUND)
        book_id = self._books.create_book(Book(title=title, author=author, owner_id=owner.id))
        logger.info("Created book id=%s for user id=%s", book_id, owner.id)
        return Outcome.success(self._books.get_for_owner(book_id, owner.id))

    def update(self, identity: Identity, book_id: int, title: str, author: str) -> Outcome[Book]:
        owner = self._resolve_owner(identity)
        if owner is None:
            return Outcome.failure(ErrorKind.PRINCIPAL_NOT_FOUND)
        if not self._books.update_for_owner(book_id, owner.id, title=title, author=author):
            return Outcome.failure(ErrorKind.NOT_FOUND_OR_NOT_OWNED)
        return Outcome.success(self._books.get_for_owner(book_id, owner.id))

    def delete(self, identity: Identity, book_id: int) -> Outcome[None]:
        owner = self._resolve_owner(identity)
        if owner is None:
            return Outcome.failure(ErrorKind.PRINCIPAL_NOT_FOUND)
        if not self._books.delete_for_owner(book_id, owner.id):
            return Outcome.failure(ErrorKind.NOT_FOUND_OR_NOT_OWNED)
        logger.info("Deleted book id=%s for user id=%s", book_id, owner.id)
        return Outcome.success(None)
