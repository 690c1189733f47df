"""
Translate service errors into HTTP errors.

NotFoundError -> 404, ConflictError -> 409 (retryable),
ValidationError -> 400.
"""

from fastapi import HTTPException

from envelope_budget.services.errors import (
    LedgerError,
    NotFoundError,
    ConflictError,
)


def to_http_exception(error: LedgerError) -> HTTPException:
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, ConflictError):
        return HTTPException(status_code=409, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))
