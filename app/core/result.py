# app/core/result.py
"""
Typed results for service operations.

Expected outcomes (missing rows, booking conflicts, bad input) travel back to
the caller as values. The HTTP layer maps ErrorKind to a status code; nothing
in the services raises for these cases.
"""
import enum
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    BAD_REQUEST = "bad_request"
    VALIDATION = "validation"


@dataclass(frozen=True)
class ServiceError:
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[ServiceError] = None

    @classmethod
    def ok(cls, value: T = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str) -> "Result[T]":
        return cls(error=ServiceError(kind=kind, message=message))

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def is_failed(self) -> bool:
        return self.error is not None


def not_found(message: str) -> Result:
    return Result.fail(ErrorKind.NOT_FOUND, message)


def conflict(message: str) -> Result:
    return Result.fail(ErrorKind.CONFLICT, message)


def bad_request(message: str) -> Result:
    return Result.fail(ErrorKind.BAD_REQUEST, message)
