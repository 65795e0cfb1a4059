"""Typed failures raised by the contact identity engine.

Callers classify on these rather than on driver exceptions:
  - ContactValidationError: input rejected before (or by) storage
  - DuplicateContactError:  a unique index fired, usually a concurrent insert
  - ContactStorageError:    connection/transaction failure after rollback
"""
from typing import Optional


class ContactError(Exception):
    """Base class for every error the engine raises."""


class ContactValidationError(ContactError):
    """Required identity fields are missing or a value is unusable."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class DuplicateContactError(ContactError):
    """A uniqueness constraint rejected the write."""

    def __init__(self, message: str, constraint: Optional[str] = None):
        super().__init__(message)
        self.constraint = constraint


class ContactStorageError(ContactError):
    """The database was unreachable or the transaction failed."""
