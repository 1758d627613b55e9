"""War rules service: evaluates one candidate or every war in a date range."""

from __future__ import annotations

import logging
from datetime import datetime

from war_rules.config import Settings, load_settings
from war_rules.domain.models import (
    WAR_EVENT_TYPE,
    ConflictCounts,
    ConflictQuery,
    EventConflictSummary,
    Severity,
    SeveritySummary,
    WarConflicts,
)
from war_rules.repos.base import WarEventReader
from war_rules.services.candidates import CharacterLookup, normalize_candidate
from war_rules.services.conflicts import (
    cap_severity,
    duplicate_severity,
    find_cap_violations,
    find_linked_account_duplicates,
    find_overlaps,
    overlap_severity,
)
from war_rules.services.statuses import AbsentStatusCache
from war_rules.services.windows import neighborhood, resolve_zone, war_day_bounds

logger = logging.getLogger(__name__)


class WarRulesService:
    """Conflict engine over a read-only :class:`WarEventReader`.

    The service never writes. The absent-status cache is shared with whoever
    owns the status write path so it can be invalidated there.
    """

    def __init__(
        self,
        reader: WarEventReader,
        status_cache: AbsentStatusCache | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.reader = reader
        self.status_cache = status_cache or AbsentStatusCache(reader)
        self.settings = settings or load_settings()

    def get_conflicts(self, query: ConflictQuery) -> WarConflicts:
        """Evaluate one existing or proposed war event."""
        if query.event_time is None or query.event_type != WAR_EVENT_TYPE:
            return WarConflicts.empty()

        is_absent = self.status_cache.is_absent
        self.status_cache.load()

        # Neighborhood first, so venue and linked account resolve from it
        start, end = neighborhood(query.event_time)
        nearby = [
            row
            for row in self.reader.war_events_between(start, end)
            if query.id is None or row.id != query.id
        ]
        lookup = CharacterLookup(nearby, self.reader)
        candidate = normalize_candidate(query, query.event_time, lookup, self.settings)

        caps = []
        if candidate.character_id and candidate.war_role.is_concrete:
            zone = resolve_zone(candidate.timezone, self.settings.default_timezone)
            anchor = self.settings.war_day_anchor_hour
            day_start, day_end = war_day_bounds(candidate.event_time, zone, anchor)
            same_day = self.reader.war_events_for_character_between(
                candidate.character_id, day_start, day_end
            )
            caps = find_cap_violations(candidate, same_day, zone, anchor)

        duplicates = find_linked_account_duplicates(candidate, nearby, lookup)
        overlapping = find_overlaps(candidate, nearby, lookup)

        logger.debug(
            "Evaluated candidate %s: %d nearby, %d caps, %d duplicates, %d overlaps",
            candidate.id,
            len(nearby),
            len(caps),
            len(duplicates),
            len(overlapping),
        )

        return WarConflicts(
            caps=caps,
            duplicates=duplicates,
            overlaps=overlapping,
            severities=SeveritySummary(
                caps=cap_severity(caps),
                duplicates=duplicate_severity(candidate, duplicates, is_absent),
                overlaps=overlap_severity(
                    candidate, overlapping, is_absent, self.settings.confirmed_status
                ),
            ),
        )

    def get_conflicts_for_range(
        self, start: datetime, end: datetime
    ) -> list[EventConflictSummary]:
        """Evaluate every war event in ``[start, end]``, ascending by time.

        Each event is scored independently; matched events are not re-scored.
        """
        if start > end:
            logger.warning("Empty conflict range: start %s is after end %s", start, end)
            return []

        events = self.reader.war_events_between(start, end)
        logger.info("Checking %d war events between %s and %s", len(events), start, end)

        results: list[EventConflictSummary] = []
        for event in events:
            conflicts = self.get_conflicts(ConflictQuery.from_event(event))
            results.append(summarize_event(event.id, conflicts))

        logger.info(
            "Range check done: %d hard, %d soft",
            sum(r.counts.hard for r in results),
            sum(r.counts.soft for r in results),
        )
        return results


def summarize_event(event_id: str, conflicts: WarConflicts) -> EventConflictSummary:
    """Collapse a WarConflicts result into ids, severities and counts."""
    severities = conflicts.severities
    hard = (severities.caps == Severity.HARD) + (severities.overlaps == Severity.HARD)
    soft = (severities.duplicates == Severity.SOFT) + (
        severities.overlaps == Severity.SOFT
    )
    return EventConflictSummary(
        event_id=event_id,
        caps=[e.id for e in conflicts.caps],
        duplicates=[e.id for e in conflicts.duplicates],
        overlaps=[e.id for e in conflicts.overlaps],
        severities=severities,
        counts=ConflictCounts(hard=hard, soft=soft),
    )
