import logging
from collections import Counter
from datetime import date

from coachbook.core.config import Settings, settings as default_settings
from coachbook.core.store import AirtableStore, Record
from coachbook.models.slot import TimeSlot
from coachbook.services.timezone_service import add_minutes, parse_instant, utc_to_business

logger = logging.getLogger(__name__)

# Fields read from the Booked table; covers both storage schemas
BOOKED_FIELDS = ["dateAndTime", "DateBooked", "TimeSlotStart"]


def slot_grid(config: Settings | None = None) -> list[tuple[str, str]]:
    """(start, end) HH:MM pairs for one business day, e.g. 09:00-10:00 .. 16:00-17:00."""
    config = config or default_settings
    slots: list[tuple[str, str]] = []
    start = f"{config.business_start_hour:02d}:00"
    for _ in range(config.slots_per_day):
        end = add_minutes(start, config.slot_duration_minutes)
        slots.append((start, end))
        start = end
    return slots


def booking_start(record: Record, business_tz: str | None = None) -> tuple[str, str] | None:
    """Business-timezone (date, start) of a Booked record, or None if it has neither schema."""
    fields = record.get("fields", {})
    instant = fields.get("dateAndTime")
    if instant:
        try:
            return utc_to_business(parse_instant(instant), business_tz)
        except ValueError:
            logger.warning("Skipping Booked record %s with bad dateAndTime %r", record.get("id"), instant)
            return None
    day, start = fields.get("DateBooked"), fields.get("TimeSlotStart")
    if day and start:
        return day, start[:5]
    return None


async def get_booked_starts(store: AirtableStore) -> list[tuple[str, str]]:
    records = await store.list_records(store.settings.airtable_booked_table, fields=BOOKED_FIELDS)
    starts = []
    for record in records:
        start = booking_start(record, store.settings.business_timezone)
        if start:
            starts.append(start)
    return starts


async def get_available_slots(store: AirtableStore, day: date | str) -> list[TimeSlot]:
    """Full slot grid for ``day``; slots matching an existing booking are marked unavailable."""
    day_str = day.isoformat() if isinstance(day, date) else day
    booked = {start for d, start in await get_booked_starts(store) if d == day_str}
    return [
        TimeSlot(start=start, end=end, available=start not in booked)
        for start, end in slot_grid(store.settings)
    ]


async def get_fully_booked_dates(store: AirtableStore, year: int, month: int) -> set[str]:
    """Dates in the month whose booking count reaches the per-day slot capacity."""
    prefix = f"{year:04d}-{month:02d}-"
    per_day = Counter(d for d, _ in await get_booked_starts(store) if d.startswith(prefix))
    capacity = store.settings.slots_per_day
    return {d for d, count in per_day.items() if count >= capacity}
