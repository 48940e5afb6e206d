#!/usr/bin/env python3
"""
Bookshelf -- personal book lists behind token authentication.

Usage:
  python main.py serve
  python main.py serve --host 0.0.0.0 --port 7070 --reload
  python main.py seed
  python main.py clear --yes

Environment variables (see core/config.py):
  SECRET_KEY        Token signing key, at least 32 characters. Required unless DEBUG=true.
  DEBUG             true = dev mode; a random SECRET_KEY is generated on startup.
  DATABASE_URL      SQLAlchemy URL for users and books (default: sqlite file at the repo root).
  SEED_SAMPLE_DATA  true = create sample users and books at startup if the database is empty.
"""

import argparse

from auth.store import UserStore
from books import seed
from books.store import BookStore
from core.config import get_settings


def _open_stores() -> tuple[UserStore, BookStore]:
    settings = get_settings()
    return UserStore(settings.database_url), BookStore(settings.database_url)


def _cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    # Fail fast on a bad SECRET_KEY before uvicorn starts its workers.
    get_settings()
    uvicorn.run("api.main:app", host=args.host, port=args.port, reload=args.reload)


def _cmd_seed(args: argparse.Namespace) -> None:
    users, books = _open_stores()
    try:
        if seed.populate(users, books):
            print("  Sample data created:")
            for username, password, role in seed.SAMPLE_USERS:
                print(f"    {username} / {password} ({role.value})")
        else:
            print("  [!] Database already has users. Nothing seeded.")
    finally:
        books.close()
        users.close()


def _cmd_clear(args: argparse.Namespace) -> None:
    if not args.yes:
        print("  [!] This deletes every user and book. Re-run with --yes to confirm.")
        return
    users, books = _open_stores()
    try:
        seed.clear(users, books)
        print("  Database cleared.")
    finally:
        books.close()
        users.close()


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="bookshelf",
        description="Bookshelf API server and database utilities.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  DEBUG=true python main.py serve --reload
  SECRET_KEY=... python main.py serve --port 7070
  DEBUG=true python main.py seed
        """,
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    serve = sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=7070, help="Port (default: 7070)")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes (development only)")
    serve.set_defaults(func=_cmd_serve)

    seed_cmd = sub.add_parser("seed", help="Create sample users and books if the database is empty")
    seed_cmd.set_defaults(func=_cmd_seed)

    clear = sub.add_parser("clear", help="Delete every user and book")
    clear.add_argument("--yes", action="store_true", help="Confirm deletion")
    clear.set_defaults(func=_cmd_clear)

    args = parser.parse_args()
    if not getattr(args, "func", None):
        parser.print_help()
        return
    args.func(args)


if __name__ == "__main__":
    main()
