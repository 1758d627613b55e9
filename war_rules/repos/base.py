"""Read-only query interface consumed by the conflict engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from war_rules.domain.models import Character, ParticipationStatus, WarEventRow


class WarEventReader(ABC):
    """Abstract base for the war rules data access.

    Every event returned is enriched with its character's linked account,
    time zone and server name.
    """

    @abstractmethod
    def war_events_between(self, start: datetime, end: datetime) -> list[WarEventRow]:
        """Return war events with ``start <= event_time <= end``, ascending."""

    @abstractmethod
    def war_events_for_character_between(
        self, character_id: str, start: datetime, end: datetime
    ) -> list[WarEventRow]:
        """Same as :meth:`war_events_between`, scoped to one character."""

    @abstractmethod
    def participation_statuses(self) -> list[ParticipationStatus]:
        """Return every participation status label."""

    @abstractmethod
    def character_by_id(self, character_id: str) -> Character | None:
        """Direct character lookup used when join data is insufficient."""
