"""
api/routes/v1/auth.py -- Registration, login, and account endpoints.

Routes:
  POST /api/v1/auth/register   -- create a USER account (public)
  POST /api/v1/auth/login      -- password login; returns a bearer token (public)
  GET  /api/v1/auth/me         -- current identity (any authenticated role)
  GET  /api/v1/auth/users      -- list all accounts (ADMIN only)

Security:
  [C1] Authenticator.login() provides timing equalization -- use it, never inline.
  [M5] Cache-Control: no-store on login responses.
  Unknown username and wrong password return the identical 401 body.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.errors import outcome_error
from api.models import CredentialRequest, ErrorDetail, ErrorResponse, LoginResponse, MeResponse, RegisterResponse, UserResponse
from auth.authenticator import Authenticator
from auth.dependencies import require_roles
from auth.models import Identity, Role, User
from auth.store import UserStore
from auth.tokens import TokenCodec
from core.outcomes import ErrorKind

# Auth policy:
# - POST /api/v1/auth/register: public
# - POST /api/v1/auth/login:    public -- login endpoint must be unauthenticated
# - GET  /api/v1/auth/me:       any authenticated role (require_roles())
# - GET  /api/v1/auth/users:    ADMIN only (require_roles(Role.ADMIN))
router = APIRouter()


def _authenticator(request: Request) -> Authenticator:
    return Authenticator(request.app.state.user_store, request.app.state.token_codec)


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.post(
    "/auth/register",
    response_model=RegisterResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
)
def register(request: Request, body: CredentialRequest) -> RegisterResponse:
    """Create a new account with the USER role.

    A taken username returns 400 username_taken. The stored record of the
    existing account is not touched.
    """
    result = _authenticator(request).register(body.username, body.password)
    if not result.ok:
        raise outcome_error(result.error)
    return RegisterResponse(username=result.value.username)


@router.post("/auth/login", response_model=LoginResponse, responses={401: {"model": ErrorResponse}})
def login(request: Request, body: CredentialRequest) -> JSONResponse:
    """Authenticate with username and password; return a bearer token.

    Returns the same generic error for wrong username and wrong password
    ("invalid_credentials") to avoid leaking username existence information.
    """
    result = _authenticator(request).login(body.username, body.password)
    if not result.ok:
        resp = JSONResponse(
            status_code=result.error.status_code,
            content=ErrorResponse(
                error=ErrorDetail(code=result.error.code, message=result.error.message)
            ).model_dump(),
        )
        resp.headers["Cache-Control"] = "no-store"  # [M5]
        return resp

    codec: TokenCodec = request.app.state.token_codec
    resp = JSONResponse(
        status_code=200,
        content=LoginResponse(
            username=body.username,
            token=result.value,
            token_type="bearer",  # noqa: S106 # nosec B106 -- OAuth token type, not a password
            expires_in=codec.ttl_seconds,
        ).model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"  # [M5]
    return resp


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


def _require_principal(request: Request, identity: Identity) -> User:
    """Resolve the token subject to a stored account, or raise 401.

    A token stays cryptographically valid after its account is deleted; the
    lookup is what makes it stop working.
    """
    user_store: UserStore = request.app.state.user_store
    user = user_store.get_by_username(identity.subject)
    if user is None:
        raise outcome_error(ErrorKind.PRINCIPAL_NOT_FOUND)
    return user


@router.get("/auth/me", response_model=MeResponse)
def me(request: Request, identity: Identity = Depends(require_roles())) -> MeResponse:
    """Return the identity carried by the caller's token."""
    _require_principal(request, identity)
    return MeResponse(username=identity.subject, role=identity.role)


@router.get("/auth/users", response_model=list[UserResponse])
def list_users(
    request: Request,
    identity: Identity = Depends(require_roles(Role.ADMIN)),
) -> list[UserResponse]:
    """List all user accounts. ADMIN only. Password hashes are never returned."""
    _require_principal(request, identity)
    user_store: UserStore = request.app.state.user_store
    return [
        UserResponse(id=u.id, username=u.username, role=u.role, created_at=u.created_at or "")
        for u in user_store.list_users()
    ]
