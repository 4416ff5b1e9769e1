# app/api/errors.py
"""Translate service results into HTTP responses"""
from fastapi import HTTPException, status

from app.core.result import ErrorKind, Result

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def unwrap(result: Result):
    """Return the value of a successful result, raise HTTPException otherwise"""
    if result.is_ok:
        return result.value

    raise HTTPException(
        status_code=STATUS_BY_KIND[result.error.kind],
        detail=result.error.message
    )
