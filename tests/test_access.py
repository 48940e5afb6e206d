"""
tests/test_access.py -- Integration tests for auth/dependencies.py.

Every protected request ends in exactly one of: handler runs, 401, 403.

Covers:
  - 401: no header, wrong scheme, empty credential, garbage, tampered,
    expired, and foreign-key tokens
  - 401 for a valid token whose principal was deleted afterwards, on book
    routes and on the account routes
  - 403: USER token on an ADMIN-only route
  - scheme name is matched case-insensitively
  - /docs and /redoc require authentication
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from auth.models import Role, User
from auth.passwords import hash_password
from auth.tokens import TokenCodec

PROTECTED = ["/api/v1/books", "/api/v1/auth/me", "/api/v1/auth/users"]


def _assert_unauthorized(resp) -> None:
    assert resp.status_code == 401, resp.text
    assert resp.json() == {
        "error": {"code": "unauthorized", "message": "Authentication required.", "detail": None}
    }


class TestMissingOrMalformedCredential:
    @pytest.mark.parametrize("path", PROTECTED)
    def test_no_header(self, api_client, path: str) -> None:
        client, _token, _codec = api_client
        _assert_unauthorized(client.get(path))

    @pytest.mark.parametrize(
        "header",
        ["Basic dGVzdDp0ZXN0", "Token abc", "Bearer", "Bearer ", "bearer-abc", "abc.def.ghi"],
    )
    def test_bad_header_shapes(self, api_client, header: str) -> None:
        client, _token, _codec = api_client
        _assert_unauthorized(client.get("/api/v1/books", headers={"Authorization": header}))

    def test_garbage_token(self, api_client) -> None:
        client, _token, _codec = api_client
        _assert_unauthorized(client.get("/api/v1/books", headers={"Authorization": "Bearer not.a.token"}))

    def test_scheme_is_case_insensitive(self, api_client) -> None:
        client, token, _codec = api_client
        resp = client.get("/api/v1/auth/me", headers={"Authorization": f"bearer {token}"})
        assert resp.status_code == 200


class TestInvalidTokens:
    def test_tampered_token(self, api_client) -> None:
        client, token, _codec = api_client
        middle = len(token) // 2
        if token[middle] == ".":
            middle += 1
        tampered = token[:middle] + ("A" if token[middle] != "A" else "B") + token[middle + 1 :]
        _assert_unauthorized(client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {tampered}"}))

    def test_expired_token(self, api_client) -> None:
        client, _token, codec = api_client
        long_ago = datetime.now(timezone.utc) - timedelta(seconds=codec.ttl_seconds + 60)
        expired = codec.issue("testadmin", Role.ADMIN, now=long_ago)
        _assert_unauthorized(client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {expired}"}))

    def test_token_signed_with_other_key(self, api_client) -> None:
        client, _token, _codec = api_client
        other = TokenCodec("some-other-signing-key-0123456789abcdef").issue("testadmin", Role.ADMIN)
        _assert_unauthorized(client.get("/api/v1/auth/users", headers={"Authorization": f"Bearer {other}"}))


class TestDeletedPrincipal:
    def test_token_for_deleted_user_is_rejected(self, api_client, register_user) -> None:
        client, _token, _codec = api_client
        headers = register_user("soon-gone")
        assert client.get("/api/v1/books", headers=headers).status_code == 200

        store = client.app.state.user_store
        store.delete_user(store.get_by_username("soon-gone").id)

        _assert_unauthorized(client.get("/api/v1/books", headers=headers))
        _assert_unauthorized(
            client.post("/api/v1/books", json={"title": "Ghost", "author": "Nobody"}, headers=headers)
        )

    def test_token_for_deleted_admin_is_rejected_on_account_routes(self, api_client) -> None:
        client, _token, codec = api_client
        store = client.app.state.user_store
        user_id = store.create_user(User(username="gone-admin", hashed_password=hash_password("pw"), role=Role.ADMIN))
        headers = {"Authorization": f"Bearer {codec.issue('gone-admin', Role.ADMIN)}"}
        assert client.get("/api/v1/auth/users", headers=headers).status_code == 200
        assert client.get("/api/v1/auth/me", headers=headers).status_code == 200

        store.delete_user(user_id)

        _assert_unauthorized(client.get("/api/v1/auth/users", headers=headers))
        _assert_unauthorized(client.get("/api/v1/auth/me", headers=headers))
        _assert_unauthorized(client.get("/api/v1/books", headers=headers))


class TestRoleGate:
    def test_user_forbidden_on_admin_route(self, api_client, register_user) -> None:
        client, _token, _codec = api_client
        headers = register_user("plain-user")
        resp = client.get("/api/v1/auth/users", headers=headers)
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "forbidden"

    def test_admin_allowed_on_admin_route(self, api_client) -> None:
        client, token, _codec = api_client
        resp = client.get("/api/v1/auth/users", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 200

    def test_admin_allowed_on_book_routes(self, api_client) -> None:
        client, token, _codec = api_client
        resp = client.get("/api/v1/books", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 200


class TestProtectedDocs:
    @pytest.mark.parametrize("path", ["/docs", "/redoc"])
    def test_docs_require_auth(self, api_client, path: str) -> None:
        client, token, _codec = api_client
        _assert_unauthorized(client.get(path))
        assert client.get(path, headers={"Authorization": f"Bearer {token}"}).status_code == 200
