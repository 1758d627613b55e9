"""Absent-status classification backed by a read-through cache."""

from __future__ import annotations

import logging

from war_rules.repos.base import WarEventReader

logger = logging.getLogger(__name__)


class AbsentStatusCache:
    """Set of participation-status labels flagged as absent.

    Loaded from the reader on first use and kept until :meth:`invalidate`
    is called. Unknown labels are never absent.
    """

    def __init__(self, reader: WarEventReader) -> None:
        self._reader = reader
        self._absent: frozenset[str] | None = None

    @property
    def is_loaded(self) -> bool:
        return self._absent is not None

    def load(self) -> frozenset[str]:
        if self._absent is None:
            statuses = self._reader.participation_statuses()
            self._absent = frozenset(s.name for s in statuses if s.is_absent)
            logger.info(
                "Loaded %d participation statuses (%d absent)",
                len(statuses),
                len(self._absent),
            )
        return self._absent

    def absent_names(self) -> frozenset[str]:
        return self.load()

    def is_absent(self, label: str | None) -> bool:
        if not label:
            return False
        return label in self.load()

    def invalidate(self) -> None:
        if self._absent is not None:
            logger.info("Invalidating absent-status cache")
        self._absent = None
