"""Tests for occupancy windows and war-day arithmetic."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from dateutil import tz

from war_rules.services.windows import (
    TimeWindow,
    active_window,
    local_day_token,
    neighborhood,
    overlaps,
    resolve_zone,
    war_day_bounds,
)

_T = datetime(2026, 5, 10, 20, 0, tzinfo=timezone.utc)


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# active_window / overlaps
# ---------------------------------------------------------------------------


def test_active_window_spans_45_minutes():
    window = active_window(_T)
    assert window.start == _T - timedelta(minutes=15)
    assert window.end == _T + timedelta(minutes=30)
    assert window.duration == timedelta(minutes=45)


def test_overlaps_is_reflexive_and_symmetric():
    a = active_window(_T)
    b = active_window(_T + timedelta(minutes=20))
    assert overlaps(a, a)
    assert overlaps(a, b) and overlaps(b, a)


def test_touching_windows_overlap():
    """Windows 45 minutes apart share exactly one endpoint."""
    a = active_window(_T)
    b = active_window(_T + timedelta(minutes=45))
    assert a.end == b.start
    assert overlaps(a, b)
    assert overlaps(b, a)


def test_separated_windows_do_not_overlap():
    a = active_window(_T)
    b = active_window(_T + timedelta(minutes=46))
    assert not overlaps(a, b)
    assert not overlaps(b, a)


def test_contained_window_overlaps():
    outer = TimeWindow(start=_T - timedelta(hours=1), end=_T + timedelta(hours=1))
    assert overlaps(outer, active_window(_T))


def test_neighborhood_is_four_hours_each_side():
    start, end = neighborhood(_T)
    assert start == _T - timedelta(hours=4)
    assert end == _T + timedelta(hours=4)


# ---------------------------------------------------------------------------
# War days
# ---------------------------------------------------------------------------


def test_local_day_token_depends_on_zone():
    instant = _utc(2026, 3, 1, 23, 30)
    assert local_day_token(instant, tz.gettz("America/New_York")) == "2026-03-01"
    assert local_day_token(instant, tz.gettz("Asia/Tokyo")) == "2026-03-02"
    assert local_day_token(instant, timezone.utc) == "2026-03-01"


def test_war_day_bounds_winter_berlin():
    start, end = war_day_bounds(_utc(2026, 1, 15, 12, 0), tz.gettz("Europe/Berlin"))
    assert start == _utc(2026, 1, 14, 23, 0)
    assert end == _utc(2026, 1, 15, 22, 59, 59, 999999)


def test_war_day_bounds_on_dst_change_is_23_hours():
    """New York springs forward on 2026-03-08, so that local day is short."""
    start, end = war_day_bounds(_utc(2026, 3, 8, 17, 0), tz.gettz("America/New_York"))
    assert start == _utc(2026, 3, 8, 5, 0)
    assert end == _utc(2026, 3, 9, 3, 59, 59, 999999)
    assert end - start == timedelta(hours=23) - timedelta(microseconds=1)


def test_anchor_hour_shifts_the_war_day():
    instant = _utc(2026, 1, 15, 5, 0)
    assert local_day_token(instant, timezone.utc, anchor_hour=6) == "2026-01-14"

    start, end = war_day_bounds(instant, timezone.utc, anchor_hour=6)
    assert start == _utc(2026, 1, 14, 6, 0)
    assert end == _utc(2026, 1, 15, 5, 59, 59, 999999)


def test_resolve_zone_known_name():
    zone = resolve_zone("Europe/Berlin")
    assert _utc(2026, 1, 15, 12, 0).astimezone(zone).utcoffset() == timedelta(hours=1)


def test_resolve_zone_unknown_name_falls_back():
    zone = resolve_zone("Not/AZone", fallback="Asia/Tokyo")
    assert _utc(2026, 1, 15, 12, 0).astimezone(zone).utcoffset() == timedelta(hours=9)


def test_resolve_zone_defaults_to_utc():
    zone = resolve_zone(None)
    assert _T.astimezone(zone).utcoffset() == timedelta(0)


def test_resolve_zone_never_opens_file_paths(tmp_path):
    not_a_tzfile = tmp_path / "hostname"
    not_a_tzfile.write_text("warhost\n")

    for name in (str(not_a_tzfile), "/etc/hostname", str(tmp_path)):
        zone = resolve_zone(name, fallback="Asia/Tokyo")
        assert _utc(2026, 1, 15, 12, 0).astimezone(zone).utcoffset() == timedelta(hours=9)


def test_resolve_zone_bad_fallback_ends_at_utc():
    zone = resolve_zone("/etc/hostname", fallback="/etc/passwd")
    assert zone is timezone.utc
