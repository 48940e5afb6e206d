"""
api/routes/v1/books.py -- Owner-scoped book routes.

Routes:
  GET    /books              -- list the caller's books
  POST   /books              -- create a book owned by the caller
  GET    /books/{book_id}    -- read one of the caller's books
  PUT    /books/{book_id}    -- replace title/author of one of the caller's books
  DELETE /books/{book_id}    -- delete one of the caller's books

Auth: every route requires a bearer token for a USER or ADMIN identity. Each
handler depends on the same gate, _owner_gate, which runs get_identity()
first; FastAPI caches both per request, so the token is verified once.

Not-found and not-owned both return 404 not_found -- never 403 -- so a
caller cannot probe for other users' book ids.
"""

from fastapi import APIRouter, Depends, Request, Response

from api.errors import outcome_error
from api.models import BookRequest, BookResponse, ErrorResponse
from auth.dependencies import require_roles
from auth.models import Identity, Role
from books.models import Book
from books.service import BookService

router = APIRouter(
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)

_owner_gate = require_roles(Role.USER, Role.ADMIN)

_NOT_FOUND = {404: {"model": ErrorResponse}}


def _service(request: Request) -> BookService:
    return BookService(request.app.state.user_store, request.app.state.book_store)


def _to_response(book: Book) -> BookResponse:
    return BookResponse(id=book.id, title=book.title, author=book.author)


@router.get("/books", response_model=list[BookResponse])
def list_books(request: Request, identity: Identity = Depends(_owner_gate)) -> list[BookResponse]:
    """Return the caller's books in creation order."""
    result = _service(request).list_owned(identity)
    if not result.ok:
        raise outcome_error(result.error)
    return [_to_response(b) for b in result.value]


@router.post("/books", response_model=BookResponse, status_code=201)
def create_book(request: Request, body: BookRequest, identity: Identity = Depends(_owner_gate)) -> BookResponse:
    """Add a book to the caller's shelf."""
    result = _service(request).create(identity, title=body.title, author=body.author)
    if not result.ok:
        raise outcome_error(result.error)
    return _to_response(result.value)


@router.get("/books/{book_id}", response_model=BookResponse, responses=_NOT_FOUND)
def get_book(request: Request, book_id: int, identity: Identity = Depends(_owner_gate)) -> BookResponse:
    result = _service(request).get(identity, book_id)
    if not result.ok:
        raise outcome_error(result.error)
    return _to_response(result.value)


@router.put("/books/{book_id}", response_model=BookResponse, responses=_NOT_FOUND)
def update_book(
    request: Request,
    book_id: int,
    body: BookRequest,
    identity: Identity = Depends(_owner_gate),
) -> BookResponse:
    result = _service(request).update(identity, book_id, title=body.title, author=body.author)
    if not result.ok:
        raise outcome_error(result.error)
    return _to_response(result.value)


@router.delete("/books/{book_id}", status_code=204, responses=_NOT_FOUND)
def delete_book(request: Request, book_id: int, identity: Identity = Depends(_owner_gate)) -> Response:
    result = _service(request).delete(identity, book_id)
    if not result.ok:
        raise outcome_error(result.error)
    return Response(status_code=204)
