"""
Utilities package for the clients service.

Exports shared helpers for logging and the string sort utility.
Keep this package lightweight and free of database concerns.
"""

from clients_service.utils.logging import configure_logging, get_logger
from clients_service.utils.sorting import sort_unique

__all__ = [
    "configure_logging",
    "get_logger",
    "sort_unique",
]
