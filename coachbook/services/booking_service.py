import logging
import re
from datetime import date

from coachbook.core.errors import InvalidBookingInput
from coachbook.core.store import AirtableStore
from coachbook.models.client import ClientProfileCreate, ClientProfileResult, ContactMethod
from coachbook.models.consultation import ConsultationCreate, ReservationResult
from coachbook.services.timezone_service import business_to_utc, calculate_end_time

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email or ""))


def _validate_contact(first_name: str, last_name: str, email: str) -> None:
    if not (first_name or "").strip() or not (last_name or "").strip() or not (email or "").strip():
        raise InvalidBookingInput("Please fill in all required fields")
    if not is_valid_email(email.strip()):
        raise InvalidBookingInput("Please enter a valid email address")


def validate_reservation(data: ConsultationCreate) -> None:
    """Format-level checks only; availability is not re-checked here."""
    _validate_contact(data.first_name, data.last_name, data.email)
    try:
        date.fromisoformat(data.date_booked)
    except (TypeError, ValueError):
        raise InvalidBookingInput("Please select a valid date") from None
    for value in (data.time_slot_start, data.time_slot_end):
        if value is not None and not _TIME_RE.match(value):
            raise InvalidBookingInput("Please select a valid time slot")


def _consultation_fields(data: ConsultationCreate) -> dict:
    fields = {
        "FirstName": data.first_name.strip(),
        "LastName": data.last_name.strip(),
        "Email": data.email.strip(),
        "BookingType": data.booking_type.value,
        "DateBooked": data.date_booked,
        "TimeSlotStart": data.time_slot_start,
        "TimeSlotEnd": data.time_slot_end,
    }
    if data.user_timezone:
        fields["UserTimezone"] = data.user_timezone
    if data.user_local_time:
        fields["UserLocalTime"] = data.user_local_time
    return fields


async def _mark_slot_booked(store: AirtableStore, day: str, start: str) -> None:
    table = store.settings.airtable_time_slots_table
    records = await store.list_records(table, fields=["Date", "StartTime", "Booked"])
    for record in records:
        fields = record.get("fields", {})
        if fields.get("Date") == day and str(fields.get("StartTime", ""))[:5] == start:
            await store.update_record(table, record["id"], {"Booked": True})
            return
    logger.warning("No %s record for %s %s; slot not flagged", table, day, start)


async def create_reservation(store: AirtableStore, data: ConsultationCreate) -> ReservationResult:
    """Persist a consultation in the Booked table.

    There is no conditional write: two visitors who both saw a slot as open can
    both book it. Partial writes (slot flag after the booking) are not rolled back.
    """
    validate_reservation(data)
    config = store.settings
    if not data.time_slot_end:
        data = data.model_copy(
            update={"time_slot_end": calculate_end_time(data.time_slot_start, config.slot_duration_minutes)}
        )
    fields = _consultation_fields(data)
    date_and_time = None
    if config.airtable_booking_schema == "instant":
        instant = business_to_utc(data.date_booked, data.time_slot_start, config.business_timezone)
        date_and_time = instant.strftime("%Y-%m-%dT%H:%M:%S.000Z")
        fields["dateAndTime"] = date_and_time

    record = await store.create_record(config.airtable_booked_table, fields)
    logger.info("Booked %s %s as record %s", data.date_booked, data.time_slot_start, record["id"])

    if config.airtable_booking_schema == "instant" and config.airtable_time_slots_table:
        await _mark_slot_booked(store, data.date_booked, data.time_slot_start)

    return ReservationResult(id=record["id"], success=True, date_and_time=date_and_time)


def validate_client_profile(data: ClientProfileCreate) -> None:
    _validate_contact(data.first_name, data.last_name, data.email)
    if data.reason_for_visit is None:
        raise InvalidBookingInput("Please tell us the reason for your visit")
    if data.preferred_contact_method in (ContactMethod.PHONE, ContactMethod.TEXT) and not (data.phone or "").strip():
        raise InvalidBookingInput("Please enter a phone number so we can reach you")
    if data.household_size is not None and data.household_size < 1:
        raise InvalidBookingInput("Household size must be at least 1")
    if data.consent is not True:
        raise InvalidBookingInput("Please confirm your consent to continue")


def _client_fields(data: ClientProfileCreate) -> dict:
    fields: dict = {
        "FirstName": data.first_name.strip(),
        "LastName": data.last_name.strip(),
        "Email": data.email.strip(),
        "ReasonForVisit": data.reason_for_visit.value,
        "Consent": data.consent,
    }
    if data.phone and data.phone.strip():
        fields["Phone"] = data.phone.strip()
    if data.relationship:
        fields["RelationshipStatus"] = data.relationship.value
    if data.household_size:
        fields["HouseholdSize"] = data.household_size
    if data.age_range:
        fields["AgeRange"] = data.age_range.value
    if data.employment_status:
        fields["EmploymentStatus"] = data.employment_status.value
    if data.primary_financial_concern:
        fields["PrimaryFinancialConcern"] = data.primary_financial_concern
    if data.debt_types:
        # deduplicated, first occurrence wins
        fields["CurrentDebtType"] = list(dict.fromkeys(d.value for d in data.debt_types))
    if data.preferred_contact_method:
        fields["PreferredContactMethod"] = data.preferred_contact_method.value
    if data.best_time_to_contact:
        fields["BestTimeToContact"] = data.best_time_to_contact
    if data.booked_record_id:
        fields["BookedRecord"] = [data.booked_record_id]
    if data.attachments:
        fields["Attachments"] = [{"url": a.url} for a in data.attachments]
    return fields


async def create_client_profile(store: AirtableStore, data: ClientProfileCreate) -> ClientProfileResult:
    validate_client_profile(data)
    record = await store.create_record(store.settings.airtable_clients_table, _client_fields(data))
    logger.info("Created client profile %s (booking %s)", record["id"], data.booked_record_id)
    return ClientProfileResult(id=record["id"], success=True)
