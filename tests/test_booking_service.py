import pytest

from coachbook.core.errors import InvalidBookingInput, StoreUnavailableError
from coachbook.models.client import ClientProfileCreate, ContactMethod, DebtType, ReasonForVisit
from coachbook.models.consultation import BookingType, ConsultationCreate
from coachbook.services.booking_service import (
    create_client_profile,
    create_reservation,
    is_valid_email,
    validate_reservation,
)
from coachbook.services.slot_service import get_available_slots

from tests.helpers import FakeStore, make_settings


def _booking(**overrides) -> ConsultationCreate:
    values = dict(
        first_name="Jane",
        last_name="Doe",
        email="jane@example.com",
        date_booked="2025-11-21",
        time_slot_start="09:00",
        time_slot_end="10:00",
        user_timezone="PST",
        user_local_time="6:00 AM - 7:00 AM",
    )
    values.update(overrides)
    return ConsultationCreate(**values)


def _profile(**overrides) -> ClientProfileCreate:
    values = dict(
        first_name="Jane",
        last_name="Doe",
        email="jane@example.com",
        reason_for_visit=ReasonForVisit.DEBT_MANAGEMENT,
        consent=True,
    )
    values.update(overrides)
    return ClientProfileCreate(**values)


@pytest.mark.parametrize(
    "email,ok",
    [("jane@example.com", True), ("a@b.co", True), ("jane@example", False), ("jane example@x.com", False), ("", False)],
)
def test_is_valid_email(email, ok):
    assert is_valid_email(email) is ok


@pytest.mark.asyncio
async def test_create_reservation_stores_utc_instant(store):
    result = await create_reservation(store, _booking())

    assert result.success
    assert result.date_and_time == "2025-11-21T14:00:00.000Z"
    [record] = store.tables["Booked"]
    assert record["id"] == result.id
    fields = record["fields"]
    assert fields["dateAndTime"] == "2025-11-21T14:00:00.000Z"
    assert fields["FirstName"] == "Jane"
    assert fields["BookingType"] == BookingType.FREE.value
    assert fields["UserTimezone"] == "PST"


@pytest.mark.asyncio
async def test_create_reservation_in_summer_uses_daylight_offset(store):
    result = await create_reservation(store, _booking(date_booked="2025-07-15"))
    assert result.date_and_time == "2025-07-15T13:00:00.000Z"


@pytest.mark.asyncio
async def test_fields_schema_stores_decomposed_fields_only():
    store = FakeStore(make_settings(airtable_booking_schema="fields"))
    result = await create_reservation(store, _booking())

    assert result.date_and_time is None
    fields = store.tables["Booked"][0]["fields"]
    assert "dateAndTime" not in fields
    assert fields["DateBooked"] == "2025-11-21"
    assert fields["TimeSlotStart"] == "09:00"


@pytest.mark.asyncio
async def test_missing_end_time_is_computed(store):
    await create_reservation(store, _booking(time_slot_start="14:00", time_slot_end=None))
    assert store.tables["Booked"][0]["fields"]["TimeSlotEnd"] == "15:00"


@pytest.mark.asyncio
async def test_matching_slot_record_is_flagged():
    store = FakeStore(make_settings(airtable_time_slots_table="TimeSlots"))
    nine = store.add("TimeSlots", {"Date": "2025-11-21", "StartTime": "09:00", "Booked": False})
    ten = store.add("TimeSlots", {"Date": "2025-11-21", "StartTime": "10:00", "Booked": False})

    await create_reservation(store, _booking())

    flags = {r["id"]: r["fields"]["Booked"] for r in store.tables["TimeSlots"]}
    assert flags == {nine["id"]: True, ten["id"]: False}


@pytest.mark.asyncio
async def test_booked_slot_is_unavailable_afterwards(store):
    await create_reservation(store, _booking())
    slots = await get_available_slots(store, "2025-11-21")
    assert [s.start for s in slots if not s.available] == ["09:00"]
    assert len(slots) == 8


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"first_name": "  "}, "Please fill in all required fields"),
        ({"email": "not-an-email"}, "Please enter a valid email address"),
        ({"date_booked": "2025-13-01"}, "Please select a valid date"),
        ({"time_slot_start": "9am"}, "Please select a valid time slot"),
    ],
)
def test_validate_reservation_rejects_bad_input(overrides, message):
    with pytest.raises(InvalidBookingInput) as exc:
        validate_reservation(_booking(**overrides))
    assert exc.value.public_message == message


@pytest.mark.asyncio
async def test_invalid_reservation_never_reaches_store(store):
    with pytest.raises(InvalidBookingInput):
        await create_reservation(store, _booking(email="bad"))
    assert store.calls == []


@pytest.mark.asyncio
async def test_store_write_errors_propagate(store):
    store.fail_writes_for.add("Booked")
    with pytest.raises(StoreUnavailableError):
        await create_reservation(store, _booking())


@pytest.mark.asyncio
async def test_client_profile_links_to_booking(store):
    booking = await create_reservation(store, _booking())
    result = await create_client_profile(
        store,
        _profile(
            booked_record_id=booking.id,
            phone=" 555-0100 ",
            household_size=3,
            debt_types=[DebtType.CREDIT_CARDS, DebtType.MEDICAL, DebtType.CREDIT_CARDS],
            preferred_contact_method=ContactMethod.PHONE,
        ),
    )

    [record] = store.tables["Clients"]
    assert record["id"] == result.id
    fields = record["fields"]
    assert fields["BookedRecord"] == [booking.id]
    assert fields["Phone"] == "555-0100"
    assert fields["CurrentDebtType"] == ["Credit Cards", "Medical"]
    assert fields["ReasonForVisit"] == "Debt Management"
    assert fields["Consent"] is True
    assert fields["HouseholdSize"] == 3


@pytest.mark.asyncio
async def test_client_profile_omits_empty_optional_fields(store):
    await create_client_profile(store, _profile())
    fields = store.tables["Clients"][0]["fields"]
    assert set(fields) == {"FirstName", "LastName", "Email", "ReasonForVisit", "Consent"}


@pytest.mark.parametrize(
    "overrides",
    [
        {"reason_for_visit": None},
        {"consent": False},
        {"preferred_contact_method": ContactMethod.PHONE, "phone": ""},
        {"preferred_contact_method": ContactMethod.TEXT, "phone": None},
        {"household_size": 0},
    ],
)
@pytest.mark.asyncio
async def test_client_profile_validation(store, overrides):
    with pytest.raises(InvalidBookingInput):
        await create_client_profile(store, _profile(**overrides))
    assert store.calls == []
