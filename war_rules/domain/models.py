"""Domain models for the war rules system."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

WAR_EVENT_TYPE = "War"


class WarRole(StrEnum):
    ATTACK = "Attack"
    DEFENSE = "Defense"
    UNSPECIFIED = "Unspecified"

    @property
    def is_concrete(self) -> bool:
        return self is not WarRole.UNSPECIFIED


class Severity(StrEnum):
    NONE = "none"
    SOFT = "soft"
    HARD = "hard"


def _new_id() -> str:
    return str(uuid.uuid4())


def as_utc(value: datetime | None) -> datetime | None:
    """Interpret naive datetimes as UTC and normalize aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class LinkedAccount(BaseModel):
    """External identity that may own several characters."""

    id: str = Field(default_factory=_new_id)
    label: str
    notes: str | None = None


class Character(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    linked_account_id: str | None = None
    server_name: str | None = None
    timezone: str | None = None


class ParticipationStatus(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    is_absent: bool = False
    is_default: bool = False
    sort_order: int = 0


class WarEvent(BaseModel):
    id: str = Field(default_factory=_new_id)
    event_type: str = WAR_EVENT_TYPE
    war_role: WarRole = WarRole.UNSPECIFIED
    character_id: str | None = None
    server_name: str | None = None
    event_time: datetime
    timezone: str | None = None
    participation_status: str | None = None

    @field_validator("event_time")
    @classmethod
    def _normalize_event_time(cls, value: datetime) -> datetime:
        return as_utc(value)


class WarEventRow(WarEvent):
    """A war event joined with its character's linked account, zone and server."""

    linked_account_id: str | None = None
    character_timezone: str | None = None
    character_server_name: str | None = None

    @property
    def venue(self) -> str | None:
        return self.server_name or self.character_server_name


# ---------------------------------------------------------------------------
# Conflict evaluation
# ---------------------------------------------------------------------------


class ConflictQuery(BaseModel):
    """Partial description of an existing or proposed war event."""

    id: str | None = None
    event_type: str = WAR_EVENT_TYPE
    war_role: WarRole | None = None
    character_id: str | None = None
    server_name: str | None = None
    event_time: datetime | None = None
    timezone: str | None = None
    participation_status: str | None = None

    @field_validator("event_time")
    @classmethod
    def _normalize_event_time(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)

    @classmethod
    def from_event(cls, event: WarEvent) -> ConflictQuery:
        return cls(
            id=event.id,
            event_type=event.event_type,
            war_role=event.war_role,
            character_id=event.character_id,
            server_name=event.server_name,
            event_time=event.event_time,
            timezone=event.timezone,
            participation_status=event.participation_status,
        )


class Candidate(BaseModel):
    """Fully normalized candidate; unresolved optional fields stay ``None``."""

    id: str | None = None
    war_role: WarRole
    character_id: str | None = None
    server_name: str | None = None
    linked_account_id: str | None = None
    event_time: datetime
    timezone: str
    participation_status: str


class SeveritySummary(BaseModel):
    caps: Severity = Severity.NONE
    duplicates: Severity = Severity.NONE
    overlaps: Severity = Severity.NONE


class WarConflicts(BaseModel):
    caps: list[WarEventRow] = Field(default_factory=list)
    duplicates: list[WarEventRow] = Field(default_factory=list)
    overlaps: list[WarEventRow] = Field(default_factory=list)
    severities: SeveritySummary = Field(default_factory=SeveritySummary)

    @classmethod
    def empty(cls) -> WarConflicts:
        return cls()


class ConflictCounts(BaseModel):
    hard: int = 0
    soft: int = 0


class EventConflictSummary(BaseModel):
    event_id: str
    caps: list[str] = Field(default_factory=list)
    duplicates: list[str] = Field(default_factory=list)
    overlaps: list[str] = Field(default_factory=list)
    severities: SeveritySummary
    counts: ConflictCounts


# ---------------------------------------------------------------------------
# Request DTOs
# ---------------------------------------------------------------------------


class CreateParticipationStatusRequest(BaseModel):
    name: str = Field(min_length=1)
    is_absent: bool = False
    is_default: bool = False
    sort_order: int = 0

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class UpdateParticipationStatusRequest(BaseModel):
    name: str | None = None
    is_absent: bool | None = None
    is_default: bool | None = None
    sort_order: int | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value
