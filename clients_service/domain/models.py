"""
Domain models for the clients service.

Defines the record schemas aligned with `clients_service.infrastructure.schema`.
These models are what the repositories hand back to callers.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field


class Client(BaseModel):
    """
    Representation of a single row in the `clients` table.
    """

    id: str = Field(..., description="Opaque identifier (ULID) assigned at creation.")
    name: str = Field(..., description="Display name.")
    birthday: Optional[datetime] = Field(None, description="Unknown when None.")
    score: int = Field(0, description="Initial score plus the sum of match deltas.")
    created_at: Optional[datetime] = Field(None, description="Set by the database on insert.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Client":
        """Decode a `clients` row; NULL score reads as 0, NULL timestamps as None."""
        return cls(
            id=row["id"],
            name=row["name"],
            birthday=row.get("birthday"),
            score=row.get("score") or 0,
            created_at=row.get("created_at"),
        )


class Match(BaseModel):
    """
    Representation of a single row in the `client_matches` table.
    """

    id: int = Field(..., description="Identity column assigned by the database.")
    client_id: str = Field(..., description="Client the delta was applied to.")
    score: int = Field(..., description="Signed score delta.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }


__all__ = ["Client", "Match"]
