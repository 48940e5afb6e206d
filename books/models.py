"""
books/models.py -- Domain dataclasses for owned books.

These are pure data containers with zero logic. Ownership rules live in
books/store.py (the owner-filtered queries) and books/service.py.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Book:
    """A book on one principal's shelf.

    owner_id is the id of the owning auth.models.User. It is set once at
    creation from the caller's identity and no store method changes it.

    id is None before the record is written to the database.
    """

    title: str
    author: str
    owner_id: int
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert
