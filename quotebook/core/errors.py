# quotebook/core/errors.py
"""
Domain errors raised by the services.

Routers never translate these by hand; ``quotebook.main`` registers one
exception handler per class and maps it to a JSON ``{"error": ...}`` body.
"""
from __future__ import annotations


class QuotebookError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        self.message = str(message)
        super().__init__(self.message)


class ValidationError(QuotebookError):
    """Input that the caller can correct (missing client name, empty items, ...)."""

    status_code = 400


class FinalizedDocumentError(ValidationError):
    """A FINALIZED document is immutable."""


class NotFoundError(QuotebookError):
    status_code = 404


class ForbiddenError(QuotebookError):
    """The document exists but belongs to another owner."""

    status_code = 403


class ConflictError(QuotebookError):
    """A write collided with a concurrent one (duplicate document number)."""

    status_code = 409


class StorageError(QuotebookError):
    status_code = 500


class NumberingCorruptionError(StorageError):
    """A stored document number does not parse as <PREFIX>-<year>-<seq>."""
