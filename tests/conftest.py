"""
tests/conftest.py -- Shared test fixtures for Bookshelf integration tests.

This module provides:
  - _make_test_stores(): creates isolated in-memory DBs for users + books
  - _patch_lifespan(): wires test stores and a test TokenCodec into app.state,
    bypassing real startup
  - api_client: (client, admin_token, codec) for API integration tests
  - register_user: helper fixture that registers + logs in and returns headers

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs route handlers in a thread pool. Plain :memory: DBs
are per-connection and would present a blank schema to each worker thread.
The named URI format (file:name?mode=memory&cache=shared&uri=true) shares
one in-memory instance across all connections in the same process.

The DEBUG env var must be set before any app import so get_settings() can
auto-generate SECRET_KEY in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Generator
from contextlib import asynccontextmanager

# CRITICAL: Set DEBUG before any app/core import so get_settings() can
# auto-generate SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.models import Role, User
from auth.passwords import hash_password
from auth.store import UserStore
from auth.tokens import TokenCodec
from books.store import BookStore

TEST_SECRET_KEY = "test-signing-key-0123456789abcdef0123456789abcdef"
TEST_TTL_SECONDS = 3600

# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores(db_suffix: str) -> tuple[UserStore, BookStore]:
    """Create isolated named shared-memory SQLite stores for test isolation.

    Both stores point at the same named database, as they do in production
    where they share Settings.database_url.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    url = f"sqlite:///file:test_bookshelf_{db_suffix}?mode=memory&cache=shared&uri=true"
    return UserStore(url), BookStore(url)


def _patch_lifespan(user_store: UserStore, book_store: BookStore, codec: TokenCodec):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.book_store = book_store
        app.state.token_codec = codec
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(TEST_SECRET_KEY, ttl_seconds=TEST_TTL_SECONDS)


@pytest.fixture(scope="module")
def api_client(request) -> Generator[tuple[TestClient, str, TokenCodec], None, None]:
    """Yield (client, admin_token, codec) for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so
    tests hit real route handlers but use isolated in-memory stores. An
    ADMIN user "testadmin" / "testpass123" exists before the client starts.
    """
    suffix = request.module.__name__.rsplit(".", 1)[-1]
    user_store, book_store = _make_test_stores(suffix)
    codec = TokenCodec(TEST_SECRET_KEY, ttl_seconds=TEST_TTL_SECONDS)

    user_store.create_user(User(username="testadmin", hashed_password=hash_password("testpass123"), role=Role.ADMIN))
    token = codec.issue("testadmin", Role.ADMIN)

    app.router.lifespan_context = _patch_lifespan(user_store, book_store, codec)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, token, codec

    book_store.close()
    user_store.close()


@pytest.fixture
def register_user(api_client) -> Callable[[str, str], dict[str, str]]:
    """Return a helper that registers a USER, logs in, and returns auth headers."""
    client, _token, _codec = api_client

    def _register(username: str, password: str = "s3cret-pass") -> dict[str, str]:
        resp = client.post("/api/v1/auth/register", json={"username": username, "password": password})
        assert resp.status_code == 201, resp.text
        resp = client.post("/api/v1/auth/login", json={"username": username, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['token']}"}

    return _register
