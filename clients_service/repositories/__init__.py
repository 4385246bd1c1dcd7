"""
Repositories package for the clients service.

Re-exports the client repository and the match ledger so downstream code can
import from `clients_service.repositories` directly.
"""

from clients_service.repositories.clients import ClientQuery, ClientRepository
from clients_service.repositories.matches import MatchLedger

__all__ = [
    "ClientQuery",
    "ClientRepository",
    "MatchLedger",
]
