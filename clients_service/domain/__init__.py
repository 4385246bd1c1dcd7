"""
Domain package for the clients service.

Exports the record models returned by the repositories. Keep this package
focused on data definitions and validation concerns.
"""

from clients_service.domain.models import Client, Match

__all__ = [
    "Client",
    "Match",
]
