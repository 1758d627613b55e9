"""Conflict matchers for war events and the severity summarizer.

Three independent checks run over a candidate:

- daily cap: a character gets one Attack and one Defense per war day;
- linked-account duplicate: one linked account holding the same role on the
  same server in overlapping windows;
- time-window overlap: the same character or linked account occupying
  overlapping windows.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Callable, Iterable, Protocol

from war_rules.domain.models import Candidate, Severity, WarEventRow
from war_rules.services.candidates import CharacterLookup
from war_rules.services.windows import active_window, local_day_token, overlaps


class Participant(Protocol):
    participation_status: str | None


@dataclass(frozen=True)
class SeverityBreakdown:
    severity: Severity
    confirmed_count: int
    non_absent_count: int


def summarize_severity(
    participants: Iterable[Participant],
    is_absent: Callable[[str | None], bool],
    confirmed_status: str = "Confirmed",
) -> SeverityBreakdown:
    """Reduce a set of participants to a severity.

    Two or more confirmed → hard; exactly one confirmed with at least two
    non-absent participants → soft; otherwise none.
    """
    confirmed = 0
    non_absent = 0
    for participant in participants:
        status = participant.participation_status
        if status == confirmed_status:
            confirmed += 1
        if not is_absent(status):
            non_absent += 1

    if confirmed >= 2:
        severity = Severity.HARD
    elif confirmed == 1 and non_absent >= 2:
        severity = Severity.SOFT
    else:
        severity = Severity.NONE
    return SeverityBreakdown(severity, confirmed, non_absent)


# ---------------------------------------------------------------------------
# Daily cap
# ---------------------------------------------------------------------------


def find_cap_violations(
    candidate: Candidate,
    same_day_events: list[WarEventRow],
    zone: tzinfo,
    anchor_hour: int = 0,
) -> list[WarEventRow]:
    """Return the character's other same-role events on the candidate's war day.

    *same_day_events* are the character's events inside the war-day bounds.
    Participation status is ignored.
    """
    if not candidate.character_id or not candidate.war_role.is_concrete:
        return []

    day_token = local_day_token(candidate.event_time, zone, anchor_hour)
    return [
        event
        for event in same_day_events
        if event.id != candidate.id
        and event.character_id == candidate.character_id
        and event.war_role == candidate.war_role
        and local_day_token(event.event_time, zone, anchor_hour) == day_token
    ]


def cap_severity(caps: list[WarEventRow]) -> Severity:
    return Severity.HARD if caps else Severity.NONE


# ---------------------------------------------------------------------------
# Linked-account duplicate
# ---------------------------------------------------------------------------


def find_linked_account_duplicates(
    candidate: Candidate,
    neighborhood: list[WarEventRow],
    lookup: CharacterLookup,
) -> list[WarEventRow]:
    """Return neighborhood events booked by the candidate's linked account
    for the same role on the same server in an overlapping window."""
    if not (
        candidate.character_id
        and candidate.server_name
        and candidate.war_role.is_concrete
        and candidate.linked_account_id
    ):
        return []

    window = active_window(candidate.event_time)
    duplicates = []
    for event in neighborhood:
        if event.id == candidate.id:
            continue
        if event.war_role != candidate.war_role:
            continue
        if not event.venue or event.venue != candidate.server_name:
            continue
        if not overlaps(window, active_window(event.event_time)):
            continue
        if lookup.row_linked_account(event) == candidate.linked_account_id:
            duplicates.append(event)
    return duplicates


def duplicate_severity(
    candidate: Candidate,
    duplicates: list[WarEventRow],
    is_absent: Callable[[str | None], bool],
) -> Severity:
    if not duplicates:
        return Severity.NONE
    non_absent = sum(
        1
        for participant in (candidate, *duplicates)
        if not is_absent(participant.participation_status)
    )
    return Severity.SOFT if non_absent >= 2 else Severity.NONE


# ---------------------------------------------------------------------------
# Time-window overlap
# ---------------------------------------------------------------------------


def find_overlaps(
    candidate: Candidate,
    neighborhood: list[WarEventRow],
    lookup: CharacterLookup,
) -> list[WarEventRow]:
    """Return neighborhood events overlapping the candidate's window that
    belong to the same character or the same linked account.

    Server-only candidates (no character) are never attributed.
    """
    if not candidate.character_id:
        return []

    window = active_window(candidate.event_time)
    matches = []
    for event in neighborhood:
        if event.id == candidate.id:
            continue
        if not overlaps(window, active_window(event.event_time)):
            continue
        same_character = event.character_id == candidate.character_id
        same_account = bool(candidate.linked_account_id) and (
            lookup.row_linked_account(event) == candidate.linked_account_id
        )
        if same_character or same_account:
            matches.append(event)
    return matches


def overlap_severity(
    candidate: Candidate,
    matches: list[WarEventRow],
    is_absent: Callable[[str | None], bool],
    confirmed_status: str = "Confirmed",
) -> Severity:
    if not candidate.character_id:
        return Severity.NONE
    return summarize_severity(
        [candidate, *matches], is_absent, confirmed_status
    ).severity
