from __future__ import annotations


class AppError(ValueError):
    """Base application-level error; callers catching ``ValueError`` still see it."""


class ValidationError(AppError):
    """Input was rejected before anything was written."""


class NotFoundError(AppError):
    """Requested record does not exist."""
