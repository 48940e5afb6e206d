"""
books/seed.py -- Sample users and books for local development.

populate() is idempotent: it does nothing if any user already exists, so it
is safe to call on every startup (Settings.seed_sample_data) or from the CLI
(`python main.py seed`).

Sample accounts:
  alice / password123  (USER)  -- 3 books
  bob   / securepass   (USER)  -- 2 books
  admin / admin123     (ADMIN) -- 2 books
"""

import logging

from auth.models import Role, User
from auth.passwords import hash_password
from auth.store import UserStore
from books.models import Book
from books.store import BookStore

logger = logging.getLogger("bookshelf.seed")

SAMPLE_USERS: list[tuple[str, str, Role]] = [
    ("alice", "password123", Role.USER),
    ("bob", "securepass", Role.USER),
    ("admin", "admin123", Role.ADMIN),
]

SAMPLE_BOOKS: dict[str, list[tuple[str, str]]] = {
    "alice": [
        ("The Hobbit", "J.R.R. Tolkien"),
        ("1984", "George Orwell"),
        ("Pride and Prejudice", "Jane Austen"),
    ],
    "bob": [
        ("Harry Potter and the Philosopher's Stone", "J.K. Rowling"),
        ("The Great Gatsby", "F. Scott Fitzgerald"),
    ],
    "admin": [
        ("Clean Code", "Robert C. Martin"),
        ("Design Patterns", "Gang of Four"),
    ],
}


def populate(users: UserStore, books: BookStore) -> bool:
    """Create the sample users and books. Returns False if users already existed."""
    if users.has_users():
        logger.info("Database already populated. Skipping sample data.")
        return False

    book_count = 0
    for username, password, role in SAMPLE_USERS:
        user_id = users.create_user(User(username=username, hashed_password=hash_password(password), role=role))
        for title, author in SAMPLE_BOOKS.get(username, []):
            books.create_book(Book(title=title, author=author, owner_id=user_id))
            book_count += 1

    logger.info("Sample data created: %d users, %d books", len(SAMPLE_USERS), book_count)
    return True


def clear(users: UserStore, books: BookStore) -> None:
    """Remove every book, then every user."""
    removed_books = books.clear()
    removed_users = users.clear()
    logger.info("Cleared %d books and %d users", removed_books, removed_users)
