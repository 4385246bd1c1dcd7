"""
Clients service - record keeping for clients and their score-affecting matches.

This package provides:

- Composable, parameterized query building from optional filter predicates
- A client repository (create, filtered query, bulk fetch, delete)
- A transactional match ledger that keeps each client's score equal to its
  initial score plus the sum of its match deltas
- A string sort/deduplicate utility

Storage is PostgreSQL through a psycopg connection pool owned by the service.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from clients_service.config import Settings, get_settings
from clients_service.domain.models import Client, Match
from clients_service.errors import ClientsServiceError, StorageError, ValidationError
from clients_service.query.filters import Contains, Equality, OneOf, Range, RangeOperator
from clients_service.repositories.clients import ClientQuery
from clients_service.service import ClientsService
from clients_service.utils.logging import configure_logging, get_logger
from clients_service.utils.sorting import sort_unique

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Service
    "ClientsService",
    "ClientQuery",
    # Models
    "Client",
    "Match",
    # Filters
    "Contains",
    "Equality",
    "OneOf",
    "Range",
    "RangeOperator",
    # Errors
    "ClientsServiceError",
    "StorageError",
    "ValidationError",
    # Logging
    "configure_logging",
    "get_logger",
    # Utilities
    "sort_unique",
]
