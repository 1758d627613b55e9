"""FastAPI application — entry point for the war rules service."""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import FastAPI, HTTPException

from war_rules.config import load_settings
from war_rules.domain.bus import EventBus
from war_rules.domain.events import ParticipationStatusesChanged, StatusChange
from war_rules.domain.handlers import HandlerRegistry
from war_rules.domain.models import (
    ConflictQuery,
    CreateParticipationStatusRequest,
    EventConflictSummary,
    ParticipationStatus,
    UpdateParticipationStatusRequest,
    WarConflicts,
    as_utc,
)
from war_rules.repos.memory import (
    CharacterRepository,
    LinkedAccountRepository,
    MemoryWarEventReader,
    ParticipationStatusRepository,
    WarEventRepository,
    seed_sample_data,
    seed_statuses,
)
from war_rules.services.statuses import AbsentStatusCache
from war_rules.services.war_rules import WarRulesService

settings = load_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="War Rules Service")

# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus()
linked_account_repo = LinkedAccountRepository()
character_repo = CharacterRepository()
war_event_repo = WarEventRepository()
status_repo = ParticipationStatusRepository()

reader = MemoryWarEventReader(
    event_repo=war_event_repo,
    character_repo=character_repo,
    status_repo=status_repo,
)
status_cache = AbsentStatusCache(reader)
war_rules_service = WarRulesService(reader, status_cache=status_cache, settings=settings)
handler_registry = HandlerRegistry(bus=event_bus, status_cache=status_cache)

seed_statuses(status_repo)
if settings.seed_sample_data:
    seed_sample_data(linked_account_repo, character_repo, war_event_repo)


# ── Conflict routes ───────────────────────────────────────────────────


@app.post("/war-conflicts", response_model=WarConflicts)
def get_war_conflicts(query: ConflictQuery) -> WarConflicts:
    """Evaluate an existing or proposed war event against the rules."""
    return war_rules_service.get_conflicts(query)


@app.get("/war-conflicts", response_model=list[EventConflictSummary])
def get_war_conflicts_for_range(
    start: datetime, end: datetime
) -> list[EventConflictSummary]:
    """Evaluate every war event between *start* and *end* (inclusive)."""
    start, end = as_utc(start), as_utc(end)
    if start > end:
        raise HTTPException(status_code=400, detail="start must not be after end")
    return war_rules_service.get_conflicts_for_range(start, end)


# ── Participation status routes ───────────────────────────────────────


@app.get("/participation-statuses", response_model=list[ParticipationStatus])
def list_participation_statuses() -> list[ParticipationStatus]:
    """List all participation statuses in display order."""
    return status_repo.list_all()


@app.post(
    "/participation-statuses", response_model=ParticipationStatus, status_code=201
)
def create_participation_status(
    body: CreateParticipationStatusRequest,
) -> ParticipationStatus:
    """Create a participation status; names must be unique."""
    status = ParticipationStatus(**body.model_dump())
    try:
        status_repo.add(status)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    event_bus.publish(
        ParticipationStatusesChanged(name=status.name, change=StatusChange.CREATED)
    )
    return status


@app.patch("/participation-statuses/{status_id}", response_model=ParticipationStatus)
def update_participation_status(
    status_id: str, body: UpdateParticipationStatusRequest
) -> ParticipationStatus:
    """Rename, reorder or flag a participation status as absent."""
    try:
        updated = status_repo.update(status_id, body.model_dump(exclude_none=True))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if updated is None:
        raise HTTPException(status_code=404, detail="Participation status not found")

    event_bus.publish(
        ParticipationStatusesChanged(name=updated.name, change=StatusChange.UPDATED)
    )
    return updated


@app.delete("/participation-statuses/{status_id}", status_code=200)
def delete_participation_status(
    status_id: str, replace_with: str | None = None
) -> dict:
    """Delete a status, optionally remapping events that carry it."""
    existing = status_repo.get(status_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="Participation status not found")
    if replace_with is not None:
        target = status_repo.get_by_name(replace_with)
        if target is None or target.id == status_id:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot remap events to {replace_with!r}",
            )

    try:
        status_repo.delete(status_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    remapped = 0
    if replace_with is not None:
        remapped = war_event_repo.remap_status(existing.name, replace_with)
        logger.info(
            "Remapped %d event(s) from %r to %r", remapped, existing.name, replace_with
        )

    event_bus.publish(
        ParticipationStatusesChanged(
            name=existing.name,
            change=StatusChange.DELETED,
            remapped_to=replace_with,
        )
    )
    return {"status": "deleted", "remapped_events": remapped}
