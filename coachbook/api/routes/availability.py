from datetime import date

from fastapi import APIRouter, Depends, Query

from coachbook.api.deps import get_store
from coachbook.api.schemas.booking import TimeSlotOut
from coachbook.api.schemas.contact import TimezoneOut
from coachbook.core.store import AirtableStore
from coachbook.services.slot_service import get_available_slots, get_fully_booked_dates
from coachbook.services.timezone_service import USA_TIMEZONES, friendly_name

router = APIRouter(tags=["availability"])


@router.get("/availability", response_model=list[TimeSlotOut])
async def availability(
    date_param: date = Query(..., alias="date"),
    store: AirtableStore = Depends(get_store),
) -> list[TimeSlotOut]:
    """All slots for the date (business timezone); booked ones have available=false."""
    slots = await get_available_slots(store, date_param)
    return [TimeSlotOut(start=s.start, end=s.end, available=s.available) for s in slots]


@router.get("/booked-dates", response_model=list[str])
async def booked_dates(
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    store: AirtableStore = Depends(get_store),
) -> list[str]:
    return sorted(await get_fully_booked_dates(store, year, month))


@router.get("/timezones", response_model=list[TimezoneOut])
async def timezones() -> list[TimezoneOut]:
    return [TimezoneOut(key=k, timezone=v, name=friendly_name(k)) for k, v in USA_TIMEZONES.items()]
