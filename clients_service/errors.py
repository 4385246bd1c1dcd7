"""
Error taxonomy for the clients service.

Callers only ever see these types: malformed input surfaces as
``ValidationError`` and anything raised by the database driver is wrapped in
``StorageError`` with the driver exception chained as ``__cause__``.
"""

from __future__ import annotations

from typing import Optional


class ClientsServiceError(Exception):
    """Base class for every error raised by the service."""


class ValidationError(ClientsServiceError, ValueError):
    """Raised for malformed filters, statements, or request values."""


class StorageError(ClientsServiceError):
    """
    Raised when the persistence layer fails (connection, constraint, timeout).

    Attributes
    ----------
    operation : str
        Name of the service operation that was running.
    """

    def __init__(self, operation: str, message: Optional[str] = None) -> None:
        self.operation = operation
        super().__init__(f"{operation} failed: {message}" if message else f"{operation} failed")


__all__ = ["ClientsServiceError", "ValidationError", "StorageError"]
