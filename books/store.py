"""
books/store.py -- SQLAlchemy-backed persistence layer for owned books.

Uses SQLAlchemy Core (not ORM) so the dataclass in books/models.py remains the
authoritative domain representation.

Pattern: Repository + Data Mapper. BookStore is the repository; _row_to_book
is the mapper. Service code never touches SQL directly.

Ownership [IDOR guard]:
  Every read, update, and delete that takes a book id also takes the owner id,
  and both go into the same WHERE clause. A book owned by someone else is
  simply not matched -- the store cannot tell "missing" from "foreign", and
  neither can anything above it. There is no fetch-then-compare step.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = BookStore("sqlite:///bookshelf.db")
    book_id = store.create_book(Book(title="Dune", author="Frank Herbert", owner_id=1))
    store.get_for_owner(book_id, owner_id=1)      # Book
    store.get_for_owner(book_id, owner_id=2)      # None
    store.close()
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Index, Integer, MetaData, String, Table
from sqlalchemy.engine import Engine

from auth.store import make_engine
from books.models import Book

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_books = Table(
    "books",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(255), nullable=False),
    Column("author", String(255), nullable=False),
    Column("user_id", Integer, nullable=False),
    Column("created_at", String(32), nullable=False),
    Index("ix_books_user_id", "user_id"),
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# SQLite INTEGER is a signed 64-bit value; no stored row can have an id outside this range.
_MAX_ROW_ID = 2**63 - 1


def _storable_id(book_id: int) -> bool:
    return 1 <= book_id <= _MAX_ROW_ID


class BookStore:
    """Repository for Book entities. Every id lookup is scoped to an owner."""

    def __init__(self, db_url: str) -> None:
        self.engine: Engine = make_engine(db_url)
        metadata.create_all(self.engine)

    def create_book(self, book: Book) -> int:
        """Insert a book and return its assigned database ID."""
        with self.engine.connect() as conn:
            result = conn.execute(
                _books.insert().values(
                    title=book.title,
                    author=book.author,
                    user_id=book.owner_id,
                    created_at=_now_iso(),
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def list_for_owner(self, owner_id: int) -> list[Book]:
        """Return the owner's books in creation order (ascending id)."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _books.select().where(_books.c.user_id == owner_id).order_by(_books.c.id)
            ).fetchall()
        return [_row_to_book(r) for r in rows]

    def get_for_owner(self, book_id: int, owner_id: int) -> Optional[Book]:
        """Return the book if it exists AND belongs to owner_id, else None."""
        if not _storable_id(book_id):
            return None
        with self.engine.connect() as conn:
            row = conn.execute(
                _books.select().where((_books.c.id == book_id) & (_books.c.user_id == owner_id))
            ).fetchone()
        return _row_to_book(row) if row is not None else None

    def update_for_owner(self, book_id: int, owner_id: int, title: str, author: str) -> bool:
        """Replace title and author. user_id is never part of the SET clause.

        Returns True if a row was updated, False if not found or wrong owner.
        """
        if not _storable_id(book_id):
            return False
        with self.engine.connect() as conn:
            result = conn.execute(
                _books.update()
                .where((_books.c.id == book_id) & (_books.c.user_id == owner_id))
                .values(title=title, author=author)
            )
            conn.commit()
        return result.rowcount > 0

    def delete_for_owner(self, book_id: int, owner_id: int) -> bool:
        """Delete a book. Returns True if deleted, False if not found or wrong owner."""
        if not _storable_id(book_id):
            return False
        with self.engine.connect() as conn:
            result = conn.execute(
                _books.delete().where((_books.c.id == book_id) & (_books.c.user_id == owner_id))
            )
            conn.commit()
        return result.rowcount > 0

    def clear(self) -> int:
        """Delete every book. Returns the number of rows removed."""
        with self.engine.connect() as conn:
            result = conn.execute(_books.delete())
            conn.commit()
        return result.rowcount

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_book(row) -> Book:
    return Book(
        id=row.id,
        title=row.title,
        author=row.author,
        owner_id=row.user_id,
        created_at=row.created_at,
    )
