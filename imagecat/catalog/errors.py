"""
Error taxonomy for the catalog.

Business errors raised inside the handler carry a ``FailureKind``; the
handler converts them into ``Failure`` results and the router maps each
kind to an HTTP status. ``PersistenceError`` is raised by store
implementations and passed through with only the status mapping.
"""

from enum import Enum


class FailureKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    PERSISTENCE = "persistence"


class CatalogError(Exception):
    """Base class for errors detected by the handler itself."""

    kind: FailureKind = FailureKind.VALIDATION


class ValidationError(CatalogError):
    """Malformed or missing request value (date, identifier, field)."""

    kind = FailureKind.VALIDATION


class ImageNotFoundError(CatalogError):
    kind = FailureKind.NOT_FOUND


class ForbiddenError(CatalogError):
    """Caller is authorized but does not own the record."""

    kind = FailureKind.FORBIDDEN


class PersistenceError(Exception):
    """The store is unreachable or rejected the operation."""
