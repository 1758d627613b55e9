"""Domain event handlers — wired up at application startup."""

from __future__ import annotations

import logging

from war_rules.domain.bus import EventBus
from war_rules.domain.events import ParticipationStatusesChanged
from war_rules.services.statuses import AbsentStatusCache

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Wires domain-event handlers to the bus."""

    def __init__(self, bus: EventBus, status_cache: AbsentStatusCache) -> None:
        self.bus = bus
        self.status_cache = status_cache
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(ParticipationStatusesChanged, self.on_statuses_changed)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_statuses_changed(self, event: ParticipationStatusesChanged) -> None:
        logger.info("Participation status %r %s", event.name, event.change)
        self.status_cache.invalidate()
