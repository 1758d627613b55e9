"""Domain events emitted by the war rules service."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class StatusChange(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class ParticipationStatusesChanged(BaseModel):
    """Fired after a participation status is created, updated or deleted."""

    name: str
    change: StatusChange
    remapped_to: str | None = None
