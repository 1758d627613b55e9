"""In-memory repositories for characters, war events and participation statuses."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from war_rules.domain.models import (
    WAR_EVENT_TYPE,
    Character,
    LinkedAccount,
    ParticipationStatus,
    WarEvent,
    WarEventRow,
    WarRole,
)
from war_rules.repos.base import WarEventReader

logger = logging.getLogger(__name__)


class LinkedAccountRepository:
    """Dict-backed store for LinkedAccount instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, LinkedAccount] = {}

    def add(self, account: LinkedAccount) -> None:
        self._store[account.id] = account

    def get(self, account_id: str) -> LinkedAccount | None:
        return self._store.get(account_id)


class CharacterRepository:
    """Dict-backed store for Character instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Character] = {}

    def add(self, character: Character) -> None:
        self._store[character.id] = character

    def get(self, character_id: str) -> Character | None:
        return self._store.get(character_id)


class WarEventRepository:
    """Dict-backed store for WarEvent instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, WarEvent] = {}

    def add(self, event: WarEvent) -> None:
        self._store[event.id] = event

    def get(self, event_id: str) -> WarEvent | None:
        return self._store.get(event_id)

    def list_all(self) -> list[WarEvent]:
        return list(self._store.values())

    def list_between(self, start: datetime, end: datetime) -> list[WarEvent]:
        """Return war events in ``[start, end]`` ordered by event_time."""
        return sorted(
            (
                e
                for e in self._store.values()
                if e.event_type == WAR_EVENT_TYPE and start <= e.event_time <= end
            ),
            key=lambda e: (e.event_time, e.id),
        )

    def remap_status(self, old_name: str, new_name: str) -> int:
        """Replace *old_name* with *new_name* on every event; return the count."""
        changed = 0
        for event in self._store.values():
            if event.participation_status == old_name:
                event.participation_status = new_name
                changed += 1
        return changed


class ParticipationStatusRepository:
    """Dict-backed store for ParticipationStatus instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, ParticipationStatus] = {}

    def list_all(self) -> list[ParticipationStatus]:
        return sorted(self._store.values(), key=lambda s: (s.sort_order, s.name))

    def get(self, status_id: str) -> ParticipationStatus | None:
        return self._store.get(status_id)

    def get_by_name(self, name: str) -> ParticipationStatus | None:
        for status in self._store.values():
            if status.name == name:
                return status
        return None

    def add(self, status: ParticipationStatus) -> None:
        existing = self.get_by_name(status.name)
        if existing is not None and existing.id != status.id:
            raise ValueError(f"A participation status named {status.name!r} already exists")
        self._store[status.id] = status

    def update(self, status_id: str, changes: dict) -> ParticipationStatus | None:
        """Merge *changes* over the stored status; ``None`` if it does not exist."""
        existing = self._store.get(status_id)
        if existing is None:
            return None
        merged = existing.model_copy(update=changes)
        if merged.name != existing.name:
            clash = self.get_by_name(merged.name)
            if clash is not None and clash.id != status_id:
                raise ValueError(
                    f"A participation status named {merged.name!r} already exists"
                )
        self._store[status_id] = merged
        return merged

    def delete(self, status_id: str) -> bool:
        existing = self._store.get(status_id)
        if existing is None:
            return False
        if existing.is_default:
            raise ValueError("Cannot delete a default status")
        del self._store[status_id]
        return True


# ---------------------------------------------------------------------------
# Join layer
# ---------------------------------------------------------------------------


class MemoryWarEventReader(WarEventReader):
    """Implements the read interface by joining the in-memory repositories."""

    def __init__(
        self,
        event_repo: WarEventRepository,
        character_repo: CharacterRepository,
        status_repo: ParticipationStatusRepository,
    ) -> None:
        self.event_repo = event_repo
        self.character_repo = character_repo
        self.status_repo = status_repo

    def _join(self, event: WarEvent) -> WarEventRow:
        character = (
            self.character_repo.get(event.character_id) if event.character_id else None
        )
        return WarEventRow(
            **event.model_dump(),
            linked_account_id=character.linked_account_id if character else None,
            character_timezone=character.timezone if character else None,
            character_server_name=character.server_name if character else None,
        )

    def war_events_between(self, start: datetime, end: datetime) -> list[WarEventRow]:
        return [self._join(e) for e in self.event_repo.list_between(start, end)]

    def war_events_for_character_between(
        self, character_id: str, start: datetime, end: datetime
    ) -> list[WarEventRow]:
        return [
            self._join(e)
            for e in self.event_repo.list_between(start, end)
            if e.character_id == character_id
        ]

    def participation_statuses(self) -> list[ParticipationStatus]:
        return self.status_repo.list_all()

    def character_by_id(self, character_id: str) -> Character | None:
        return self.character_repo.get(character_id)


# ---------------------------------------------------------------------------
# Seed data – default statuses and a few near-future wars for local runs
# ---------------------------------------------------------------------------

DEFAULT_STATUSES = [
    ParticipationStatus(name="Signed Up", is_default=True, sort_order=0),
    ParticipationStatus(name="Confirmed", is_default=True, sort_order=1),
    ParticipationStatus(name="Tentative", sort_order=2),
    ParticipationStatus(name="Absent", is_absent=True, is_default=True, sort_order=3),
]


def seed_statuses(repo: ParticipationStatusRepository) -> None:
    for status in DEFAULT_STATUSES:
        repo.add(status.model_copy(deep=True))


def seed_sample_data(
    linked_account_repo: LinkedAccountRepository,
    character_repo: CharacterRepository,
    event_repo: WarEventRepository,
) -> None:
    now = datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0)

    account = LinkedAccount(label="Main Steam")
    linked_account_repo.add(account)

    knight = Character(
        name="Aldric",
        linked_account_id=account.id,
        server_name="Valhalla",
        timezone="Europe/Berlin",
    )
    archer = Character(
        name="Brenna",
        linked_account_id=account.id,
        server_name="Valhalla",
        timezone="Europe/Berlin",
    )
    character_repo.add(knight)
    character_repo.add(archer)

    # Two characters on one account attacking the same server ten minutes apart
    event_repo.add(
        WarEvent(
            war_role=WarRole.ATTACK,
            character_id=knight.id,
            server_name="Valhalla",
            event_time=now + timedelta(hours=2),
            participation_status="Confirmed",
        )
    )
    event_repo.add(
        WarEvent(
            war_role=WarRole.ATTACK,
            character_id=archer.id,
            server_name="Valhalla",
            event_time=now + timedelta(hours=2, minutes=10),
            participation_status="Confirmed",
        )
    )
    # Server-only defense, not attributable to a character
    event_repo.add(
        WarEvent(
            war_role=WarRole.DEFENSE,
            server_name="Valhalla",
            event_time=now + timedelta(hours=5),
        )
    )
    logger.info("Seeded sample war data (%d events)", len(event_repo.list_all()))
