"""SDK public error classes and exception mapping.

Public exceptions:
- UserInputError: invalid user input or format (unknown kind, bad definition)
- DomainViolation: domain rule violations
- NotFound: requested category does not exist
- UnexpectedError: any other error not classified above

map_exception(exc) keeps the original message and returns an instance of the
public exception type best matching the input.
"""
from __future__ import annotations

from py_category_sync.application.results import Err, FailureKind
from py_category_sync.domain.errors import DomainError, ValidationError

__all__ = [
    "UserInputError",
    "DomainViolation",
    "NotFound",
    "UnexpectedError",
    "map_exception",
    "error_from_result",
]


class UserInputError(Exception):
    """Raised when user input is invalid or cannot be parsed."""


class DomainViolation(Exception):
    """Raised when domain rules are violated."""


class NotFound(Exception):
    """Raised when a referenced category does not exist."""


class UnexpectedError(Exception):
    """Raised when an unexpected error occurs inside the SDK/use cases."""


def map_exception(exc: Exception) -> Exception:
    """Map internal exceptions to public SDK exceptions.

    Rules:
    - public SDK exceptions are returned unchanged
    - ValidationError -> UserInputError
    - DomainError -> DomainViolation
    - ValueError -> UserInputError
    - LookupError -> NotFound
    - any other -> UnexpectedError
    """
    if isinstance(exc, UserInputError | DomainViolation | NotFound | UnexpectedError):
        return exc
    msg = str(exc)
    if isinstance(exc, ValidationError):
        return UserInputError(msg)
    if isinstance(exc, DomainError):
        return DomainViolation(msg)
    if isinstance(exc, ValueError):
        return UserInputError(msg)
    if isinstance(exc, LookupError):
        return NotFound(msg)
    return UnexpectedError(msg)


def error_from_result(err: Err) -> Exception:
    """Public exception for a failed repository call (404 -> NotFound, 4xx -> UserInputError)."""
    if err.status == 404:
        return NotFound(err.reason)
    if err.kind is FailureKind.INVALID or (err.status is not None and 400 <= err.status < 500):
        return UserInputError(err.reason)
    return UnexpectedError(err.reason)
