"""Service for turning a partial event description into a normalized Candidate."""

from __future__ import annotations

from datetime import datetime

from war_rules.config import Settings
from war_rules.domain.models import (
    Candidate,
    Character,
    ConflictQuery,
    WarEventRow,
    WarRole,
    as_utc,
)
from war_rules.repos.base import WarEventReader


class CharacterLookup:
    """Resolves per-character join data from a neighborhood, then the reader.

    Neighborhood rows are tried first; the reader's ``character_by_id`` is
    the fallback. Lookups are memoized for the life of one evaluation.
    """

    def __init__(self, neighborhood: list[WarEventRow], reader: WarEventReader) -> None:
        self._neighborhood = neighborhood
        self._reader = reader
        self._characters: dict[str, Character | None] = {}

    def _character(self, character_id: str) -> Character | None:
        if character_id not in self._characters:
            self._characters[character_id] = self._reader.character_by_id(character_id)
        return self._characters[character_id]

    def venue_for(self, character_id: str | None) -> str | None:
        if not character_id:
            return None
        for row in self._neighborhood:
            if row.character_id == character_id and row.venue:
                return row.venue
        character = self._character(character_id)
        return character.server_name if character else None

    def linked_account_for(self, character_id: str | None) -> str | None:
        if not character_id:
            return None
        for row in self._neighborhood:
            if row.character_id == character_id and row.linked_account_id:
                return row.linked_account_id
        character = self._character(character_id)
        return character.linked_account_id if character else None

    def timezone_for(self, character_id: str | None) -> str | None:
        if not character_id:
            return None
        for row in self._neighborhood:
            if row.character_id == character_id and row.character_timezone:
                return row.character_timezone
        character = self._character(character_id)
        return character.timezone if character else None

    def row_linked_account(self, row: WarEventRow) -> str | None:
        """Linked account of a neighborhood row, resolved the same way."""
        return row.linked_account_id or self.linked_account_for(row.character_id)


def normalize_candidate(
    query: ConflictQuery,
    event_time: datetime,
    lookup: CharacterLookup,
    settings: Settings,
) -> Candidate:
    """Build a fully populated Candidate from *query* at *event_time*.

    Never raises for missing optional fields: unresolved venue or linked
    account stay ``None``.
    """
    character_id = query.character_id or None
    return Candidate(
        id=query.id,
        war_role=query.war_role or WarRole.UNSPECIFIED,
        character_id=character_id,
        server_name=query.server_name or lookup.venue_for(character_id),
        linked_account_id=lookup.linked_account_for(character_id),
        event_time=as_utc(event_time),
        timezone=(
            query.timezone
            or lookup.timezone_for(character_id)
            or settings.default_timezone
        ),
        participation_status=(
            query.participation_status or settings.default_participation_status
        ),
    )
