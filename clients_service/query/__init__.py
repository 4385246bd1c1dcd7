"""
Query building package: filter predicates and the statement composer.
"""

from clients_service.query.composer import Statement, delete, insert, select, update
from clients_service.query.filters import (
    Contains,
    Equality,
    FilterPredicate,
    OneOf,
    Range,
    RangeOperator,
)

__all__ = [
    # Statements
    "Statement",
    "delete",
    "insert",
    "select",
    "update",
    # Predicates
    "Contains",
    "Equality",
    "FilterPredicate",
    "OneOf",
    "Range",
    "RangeOperator",
]
