from datetime import UTC, datetime
from pathlib import Path

import pytest

from coachbook.services import timezone_service as tz


@pytest.mark.parametrize(
    "value,expected",
    [("14:00", "2:00 PM"), ("09:00", "9:00 AM"), ("00:30", "12:30 AM"), ("12:00", "12:00 PM"), ("23:45", "11:45 PM")],
)
def test_format_for_display(value, expected):
    assert tz.format_for_display(value) == expected


def test_convert_new_york_to_los_angeles_is_three_hours_earlier():
    converted = tz.convert_time("2025-11-21", "14:00", "America/New_York", "America/Los_Angeles")
    assert converted == "11:00"
    assert tz.format_for_display(converted) == "11:00 AM"


def test_convert_accepts_abbreviations():
    assert tz.convert_time("2025-11-21", "09:00", "EST", "CST") == "08:00"
    assert tz.convert_from_business("2025-11-21", "09:00", "MST") == "07:00"
    assert tz.convert_to_business("2025-11-21", "06:00", "PST") == "09:00"


def test_business_to_utc_follows_daylight_saving():
    assert tz.business_to_utc("2025-01-15", "09:00") == datetime(2025, 1, 15, 14, 0, tzinfo=UTC)
    assert tz.business_to_utc("2025-07-15", "09:00") == datetime(2025, 7, 15, 13, 0, tzinfo=UTC)


def test_utc_to_business_uses_eastern_calendar_date():
    assert tz.utc_to_business(datetime(2025, 11, 21, 14, 0, tzinfo=UTC)) == ("2025-11-21", "09:00")
    # 02:00 UTC on the 22nd is still the evening of the 21st in New York
    assert tz.utc_to_business(datetime(2025, 11, 22, 2, 0, tzinfo=UTC)) == ("2025-11-21", "21:00")
    # naive values are treated as UTC
    assert tz.utc_to_business(datetime(2025, 11, 21, 14, 0)) == ("2025-11-21", "09:00")


def test_explicit_business_zone_overrides_settings():
    assert tz.business_to_utc("2025-11-21", "09:00", "America/Chicago") == datetime(2025, 11, 21, 15, 0, tzinfo=UTC)
    assert tz.utc_to_business(datetime(2025, 11, 21, 15, 0, tzinfo=UTC), "America/Chicago") == ("2025-11-21", "09:00")
    assert tz.convert_from_business("2025-11-21", "09:00", "EST", "America/Chicago") == "10:00"


@pytest.mark.parametrize(
    "zone,ok",
    [("EST", True), ("pst", True), ("Europe/London", True), ("Mars/Olympus", False), ("", False), (None, False)],
)
def test_is_supported_timezone(zone, ok):
    assert tz.is_supported_timezone(zone) is ok


def test_parse_instant_accepts_z_suffix():
    assert tz.parse_instant("2025-11-21T14:00:00.000Z") == datetime(2025, 11, 21, 14, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    "zone,expected",
    [
        ("America/New_York", "EST"),
        ("America/Toronto", "EST"),
        ("America/Havana", "EST"),
        ("America/Winnipeg", "CST"),
        ("America/Phoenix", "MST"),
        ("America/Vancouver", "PST"),
        ("PST", "PST"),
        ("Europe/London", None),
        (None, None),
    ],
)
def test_normalize_timezone(zone, expected):
    assert tz.normalize_timezone(zone) == expected


def test_friendly_name_falls_back_to_raw_id():
    assert tz.friendly_name("America/Chicago") == "Central Time (CST)"
    assert tz.friendly_name("EST") == "Eastern Time (EST)"
    assert tz.friendly_name("Europe/Paris") == "Europe/Paris"


def test_resolve_timezone():
    assert tz.resolve_timezone("est") == "America/New_York"
    assert tz.resolve_timezone("America/Denver") == "America/Denver"


def test_end_time_math():
    assert tz.calculate_end_time("09:30", 30) == "10:00"
    assert tz.calculate_end_time("16:00", 60) == "17:00"
    assert tz.add_minutes("08:45", 90) == "10:15"


def test_business_hours_helpers():
    marks = tz.generate_business_hours(30)
    assert marks[0] == "09:00"
    assert marks[-1] == "16:30"
    assert len(marks) == 16
    assert tz.is_business_hours("16:59")
    assert not tz.is_business_hours("17:00")
    assert not tz.is_business_hours("08:59")


def test_detect_timezone_reads_tz_variable(monkeypatch):
    monkeypatch.setenv("TZ", "America/Denver")
    assert tz.detect_timezone() == "America/Denver"


def test_detect_timezone_rejects_unknown_zone(monkeypatch):
    monkeypatch.setenv("TZ", "Not/A_Zone")
    assert tz.detect_timezone() is None


def test_detect_timezone_fails_soft(monkeypatch):
    monkeypatch.delenv("TZ", raising=False)

    def broken(self, strict=False):
        raise OSError("no /etc/localtime")

    monkeypatch.setattr(Path, "resolve", broken)
    assert tz.detect_timezone() is None
