from __future__ import annotations


class DomainError(Exception):
    """Base class for errors raised by the task engine."""


class ValidationError(DomainError):
    """Input rejected before any state was changed."""


class NotFoundError(DomainError):
    """Operation referenced a task id that is not in the collection."""


class PersistenceError(DomainError):
    """Storage medium could not be read or written."""
