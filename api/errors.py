"""
api/errors.py -- Translate failed Outcomes into HTTP errors.

Services return core.outcomes.Outcome values; route handlers call
outcome_error() on a failure and raise the result. The HTTPException detail is
an ErrorDetail dict, which api/main.py's handler wraps in the standard
{"error": {...}} envelope.

The unified kinds produce byte-identical responses for every cause they
cover, so clients cannot tell "no such user" from "wrong password" or
"no such book" from "someone else's book".
"""

from fastapi import HTTPException

from api.models import ErrorDetail
from core.outcomes import ErrorKind


def outcome_error(kind: ErrorKind) -> HTTPException:
    return HTTPException(
        status_code=kind.status_code,
        detail=ErrorDetail(code=kind.code, message=kind.message).model_dump(),
    )
