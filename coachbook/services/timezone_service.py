"""Timezone helpers.

Slots are defined in the business timezone (Eastern) and shown to visitors in
their own zone. Everything here is pure except the initial platform probe in
``detect_timezone``.
"""
import logging
import os
from datetime import UTC, date, datetime, time, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from coachbook.core.config import settings

logger = logging.getLogger(__name__)

USA_TIMEZONES: dict[str, str] = {
    "EST": "America/New_York",
    "CST": "America/Chicago",
    "MST": "America/Denver",
    "PST": "America/Los_Angeles",
}

_FRIENDLY_NAMES: dict[str, str] = {
    "EST": "Eastern Time (EST)",
    "CST": "Central Time (CST)",
    "MST": "Mountain Time (MST)",
    "PST": "Pacific Time (PST)",
}

# Zones that share a US offset; shown to the visitor as the US label
_EQUIVALENT_ZONES: dict[str, str] = {
    "America/New_York": "EST",
    "America/Detroit": "EST",
    "America/Indiana/Indianapolis": "EST",
    "America/Kentucky/Louisville": "EST",
    "America/Toronto": "EST",
    "America/Montreal": "EST",
    "America/Nassau": "EST",
    "America/Havana": "EST",
    "US/Eastern": "EST",
    "America/Chicago": "CST",
    "America/Indiana/Knox": "CST",
    "America/Menominee": "CST",
    "America/Winnipeg": "CST",
    "America/Mexico_City": "CST",
    "US/Central": "CST",
    "America/Denver": "MST",
    "America/Boise": "MST",
    "America/Phoenix": "MST",
    "America/Edmonton": "MST",
    "America/Chihuahua": "MST",
    "US/Mountain": "MST",
    "US/Arizona": "MST",
    "America/Los_Angeles": "PST",
    "America/Vancouver": "PST",
    "America/Tijuana": "PST",
    "US/Pacific": "PST",
}

_ZONEINFO_MARKER = "zoneinfo/"


def _is_valid_zone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True


def detect_timezone() -> str | None:
    """Best-effort IANA name of the platform timezone; None if it cannot be determined."""
    try:
        candidate = os.environ.get("TZ", "").lstrip(":")
        if not candidate:
            target = str(Path("/etc/localtime").resolve())
            if _ZONEINFO_MARKER in target:
                candidate = target.split(_ZONEINFO_MARKER, 1)[1]
    except OSError as e:
        logger.warning("Failed to detect timezone: %s", e)
        return None
    if candidate and _is_valid_zone(candidate):
        return candidate
    return None


def resolve_timezone(tz: str) -> str:
    """Map a US abbreviation (EST, CST, ...) to its IANA name; pass IANA names through."""
    return USA_TIMEZONES.get(tz.upper(), tz) if tz else tz


def is_supported_timezone(tz: str | None) -> bool:
    """True for a US abbreviation or any IANA name this host can load."""
    return bool(tz) and _is_valid_zone(resolve_timezone(tz))


def timezone_abbreviation(tz: str) -> str | None:
    """Abbreviation for one of the four canonical zones, else None."""
    if tz.upper() in USA_TIMEZONES:
        return tz.upper()
    for key, value in USA_TIMEZONES.items():
        if value == tz:
            return key
    return None


def normalize_timezone(tz: str | None) -> str | None:
    """Collapse any zone sharing a US offset onto EST/CST/MST/PST."""
    if not tz:
        return None
    return timezone_abbreviation(tz) or _EQUIVALENT_ZONES.get(tz)


def friendly_name(tz: str) -> str:
    key = timezone_abbreviation(tz)
    return _FRIENDLY_NAMES[key] if key else tz


def _parse_time(value: str) -> time:
    hours, minutes = value.split(":")[:2]
    return time(int(hours), int(minutes))


def _parse_date(value: str | date) -> date:
    return value if isinstance(value, date) else date.fromisoformat(value)


def convert_time(day: str | date, hhmm: str, from_tz: str, to_tz: str) -> str:
    """Convert a wall-clock HH:MM on ``day`` from one zone to another (DST aware)."""
    source = ZoneInfo(resolve_timezone(from_tz))
    target = ZoneInfo(resolve_timezone(to_tz))
    local = datetime.combine(_parse_date(day), _parse_time(hhmm), tzinfo=source)
    return local.astimezone(target).strftime("%H:%M")


def convert_from_business(day: str | date, hhmm: str, target_tz: str, business_tz: str | None = None) -> str:
    return convert_time(day, hhmm, business_tz or settings.business_timezone, target_tz)


def convert_to_business(day: str | date, hhmm: str, user_tz: str, business_tz: str | None = None) -> str:
    return convert_time(day, hhmm, user_tz, business_tz or settings.business_timezone)


def business_to_utc(day: str | date, hhmm: str, business_tz: str | None = None) -> datetime:
    """Absolute UTC instant for a business-timezone date and start time."""
    zone = ZoneInfo(business_tz or settings.business_timezone)
    return datetime.combine(_parse_date(day), _parse_time(hhmm), tzinfo=zone).astimezone(UTC)


def utc_to_business(instant: datetime, business_tz: str | None = None) -> tuple[str, str]:
    """(YYYY-MM-DD, HH:MM) of an instant in the business timezone. Naive input is UTC."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    local = instant.astimezone(ZoneInfo(business_tz or settings.business_timezone))
    return local.date().isoformat(), local.strftime("%H:%M")


def parse_instant(value: str) -> datetime:
    """Parse an ISO 8601 instant such as ``2025-11-21T14:00:00.000Z``."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def format_for_display(hhmm: str) -> str:
    """'14:00' -> '2:00 PM'."""
    t = _parse_time(hhmm)
    period = "PM" if t.hour >= 12 else "AM"
    return f"{t.hour % 12 or 12}:{t.minute:02d} {period}"


def add_minutes(hhmm: str, minutes: int) -> str:
    t = _parse_time(hhmm)
    total = t.hour * 60 + t.minute + minutes
    return f"{total // 60:02d}:{total % 60:02d}"


def calculate_end_time(start: str, duration_minutes: int) -> str:
    return add_minutes(start, duration_minutes)


def generate_business_hours(interval_minutes: int = 30) -> list[str]:
    """HH:MM marks across business hours at the given interval."""
    start = datetime(2000, 1, 1, settings.business_start_hour)
    end = datetime(2000, 1, 1, settings.business_end_hour)
    marks: list[str] = []
    current = start
    while current < end:
        marks.append(current.strftime("%H:%M"))
        current += timedelta(minutes=interval_minutes)
    return marks


def is_business_hours(hhmm: str) -> bool:
    return settings.business_start_hour <= _parse_time(hhmm).hour < settings.business_end_hour
