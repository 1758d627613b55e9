"""Time-window arithmetic for war events: occupancy windows and war days."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo

from dateutil import tz

logger = logging.getLogger(__name__)

WINDOW_LEAD = timedelta(minutes=15)
WINDOW_TAIL = timedelta(minutes=30)
NEIGHBORHOOD_RADIUS = timedelta(hours=4)

_DAY_TOKEN_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class TimeWindow:
    """Closed interval ``[start, end]`` of absolute instants."""

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


def active_window(event_time: datetime) -> TimeWindow:
    """Return the occupancy window of a war starting at *event_time*.

    The window opens 15 minutes before the nominal time and closes 30 minutes
    after it.
    """
    return TimeWindow(start=event_time - WINDOW_LEAD, end=event_time + WINDOW_TAIL)


def overlaps(a: TimeWindow, b: TimeWindow) -> bool:
    """True unless one window ends strictly before the other starts.

    Touching endpoints count as an overlap.
    """
    return not (a.end < b.start or b.end < a.start)


def neighborhood(event_time: datetime) -> tuple[datetime, datetime]:
    """Return the ``(from, to)`` bounds scanned around a candidate."""
    return event_time - NEIGHBORHOOD_RADIUS, event_time + NEIGHBORHOOD_RADIUS


def resolve_zone(name: str | None, fallback: str = "UTC") -> tzinfo:
    """Resolve an IANA zone name, degrading to *fallback* (then UTC) if unknown.

    File paths are never opened: ``gettz`` would read them as tzfiles.
    """
    for candidate in (name, fallback):
        if not candidate:
            continue
        zone = None
        if not os.path.isabs(candidate):
            try:
                zone = tz.gettz(candidate)
            except (ValueError, OSError):
                zone = None
        if zone is not None:
            return zone
        logger.warning("Unknown time zone %r, falling back", candidate)
    return timezone.utc


def war_day(event_time: datetime, zone: tzinfo, anchor_hour: int = 0) -> date:
    """Return the local war day that *event_time* belongs to in *zone*."""
    local = event_time.astimezone(zone)
    return (local - timedelta(hours=anchor_hour)).date()


def local_day_token(event_time: datetime, zone: tzinfo, anchor_hour: int = 0) -> str:
    """Return the ``YYYY-MM-DD`` war-day token of *event_time* rendered in *zone*."""
    return war_day(event_time, zone, anchor_hour).strftime(_DAY_TOKEN_FORMAT)


def war_day_bounds(
    event_time: datetime, zone: tzinfo, anchor_hour: int = 0
) -> tuple[datetime, datetime]:
    """Return the inclusive UTC bounds of the war day containing *event_time*.

    With ``anchor_hour=0`` this is local midnight through 23:59:59.999999.
    """
    day = war_day(event_time, zone, anchor_hour)
    start_local = datetime.combine(day, time(hour=anchor_hour), tzinfo=zone)
    next_local = datetime.combine(
        day + timedelta(days=1), time(hour=anchor_hour), tzinfo=zone
    )
    start_utc = start_local.astimezone(timezone.utc)
    end_utc = next_local.astimezone(timezone.utc) - timedelta(microseconds=1)
    return start_utc, end_utc
