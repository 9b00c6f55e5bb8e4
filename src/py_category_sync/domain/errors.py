from __future__ import annotations

__all__ = ["DomainError", "ValidationError"]


class DomainError(Exception):
    """Base class for domain rule violations."""


class ValidationError(DomainError):
    """Raised when a value fails domain validation (format, length, kind)."""
