"""Booking wizard: calendar -> time slots -> contact info -> success.

A UI-independent state machine for one visitor session. The front end calls
the handlers below and renders from the public attributes. Store reads go
through a bounded retry policy and degrade to empty results; the final submit
writes the reservation and then the linked client profile.
"""
import logging
from collections.abc import Callable
from datetime import date
from enum import Enum

from coachbook.core.errors import BookingSiteError, InvalidBookingInput, StoreUnavailableError
from coachbook.core.retry import RetryPolicy
from coachbook.core.store import AirtableStore
from coachbook.models.client import ClientProfileCreate
from coachbook.models.consultation import BookingType, ConsultationCreate
from coachbook.models.slot import TimeSlot
from coachbook.services import calendar_service, slot_service
from coachbook.services.booking_service import (
    create_client_profile,
    create_reservation,
    validate_client_profile,
)
from coachbook.services.timezone_service import (
    convert_from_business,
    detect_timezone,
    format_for_display,
    is_supported_timezone,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "EST"


class BookingStep(str, Enum):
    CALENDAR = "calendar"
    TIME_SLOTS = "timeSlots"
    CONTACT_INFO = "contactInfo"
    SUCCESS = "success"


class MonthCache:
    """Fully-booked date sets keyed by (year, month) for one session."""

    def __init__(self) -> None:
        self._months: dict[tuple[int, int], set[str]] = {}

    def get(self, year: int, month: int) -> set[str] | None:
        return self._months.get((year, month))

    def put(self, year: int, month: int, dates: set[str]) -> None:
        self._months[(year, month)] = dates

    def drop(self, year: int, month: int) -> None:
        self._months.pop((year, month), None)

    def __contains__(self, key: tuple[int, int]) -> bool:
        return key in self._months


class BookingWizard:
    def __init__(
        self,
        store: AirtableStore,
        retry_policy: RetryPolicy | None = None,
        today: Callable[[], date] = date.today,
        timezone: str | None = None,
        booking_type: BookingType = BookingType.FREE,
    ) -> None:
        self.store = store
        self.retry_policy = retry_policy or RetryPolicy()
        self._today = today
        self.booking_type = booking_type
        self.month_cache = MonthCache()

        detected = timezone or detect_timezone()
        self.detected_timezone = detected if is_supported_timezone(detected) else None
        self.user_timezone = self.detected_timezone or DEFAULT_TIMEZONE
        self.manual_timezone = False
        self._reset()

    def _reset(self) -> None:
        now = self._today()
        self.step = BookingStep.CALENDAR
        self.current_year, self.current_month = now.year, now.month
        self.fully_booked: set[str] = set()
        self.selected_date: date | None = None
        self.slots: list[TimeSlot] = []
        self.selected_slot: TimeSlot | None = None
        self.is_loading = False
        self.is_submitting = False
        self.form_error: str | None = None
        self.reservation_id: str | None = None
        self.client_profile_id: str | None = None

    def close(self) -> None:
        """Closing the modal; the next open starts again at the calendar."""
        self._reset()

    # --- calendar ---

    def calendar_days(self) -> list[date | None]:
        return calendar_service.days_in_month(self.current_year, self.current_month)

    async def load_month(self) -> set[str]:
        """Fully-booked dates for the visible month, fetched once per session."""
        year, month = self.current_year, self.current_month
        cached = self.month_cache.get(year, month)
        if cached is not None:
            self.fully_booked = cached
            return cached
        try:
            dates = await self.retry_policy.run(slot_service.get_fully_booked_dates, self.store, year, month)
        except StoreUnavailableError:
            logger.warning("Fully booked dates unavailable for %d-%02d, showing none", year, month)
            self.fully_booked = set()
            return self.fully_booked
        self.month_cache.put(year, month, dates)
        self.fully_booked = dates
        return dates

    async def next_month(self) -> None:
        self.current_year, self.current_month = calendar_service.shift_month(self.current_year, self.current_month, 1)
        await self.load_month()

    async def previous_month(self) -> None:
        self.current_year, self.current_month = calendar_service.shift_month(self.current_year, self.current_month, -1)
        await self.load_month()

    def is_date_selectable(self, d: date) -> bool:
        return (
            calendar_service.is_weekday(d)
            and not calendar_service.is_past_date(d, self._today())
            and d.isoformat() not in self.fully_booked
        )

    async def select_date(self, d: date) -> bool:
        """Move to the time-slot step for ``d``. Returns False (no state change) if not allowed."""
        if self.step != BookingStep.CALENDAR or not self.is_date_selectable(d):
            return False
        self.selected_date = d
        self.selected_slot = None
        self.step = BookingStep.TIME_SLOTS
        await self.load_slots()
        return True

    # --- time slots ---

    async def load_slots(self) -> list[TimeSlot]:
        if self.selected_date is None:
            return []
        self.is_loading = True
        try:
            self.slots = await self.retry_policy.run(
                slot_service.get_available_slots, self.store, self.selected_date
            )
        except StoreUnavailableError:
            logger.warning("Slots unavailable for %s, showing none", self.selected_date)
            self.slots = []
        finally:
            self.is_loading = False
        return self.slots

    def set_timezone(self, tz: str) -> bool:
        """Switch the display zone. Unknown zones are ignored and return False."""
        if not is_supported_timezone(tz):
            logger.info("Ignoring unsupported timezone %r", tz)
            return False
        self.user_timezone = tz
        self.manual_timezone = True
        return True

    def slot_label(self, slot: TimeSlot) -> str:
        """'11:00 AM - 12:00 PM' in the visitor's timezone."""
        if self.selected_date is None:
            return f"{format_for_display(slot.start)} - {format_for_display(slot.end)}"
        business_tz = self.store.settings.business_timezone
        start = convert_from_business(self.selected_date, slot.start, self.user_timezone, business_tz)
        end = convert_from_business(self.selected_date, slot.end, self.user_timezone, business_tz)
        return f"{format_for_display(start)} - {format_for_display(end)}"

    def select_slot(self, slot: TimeSlot) -> bool:
        if self.step != BookingStep.TIME_SLOTS or not slot.available:
            return False
        self.selected_slot = slot
        self.form_error = None
        self.step = BookingStep.CONTACT_INFO
        return True

    def go_back(self) -> None:
        if self.step == BookingStep.TIME_SLOTS:
            self.step = BookingStep.CALENDAR
            self.selected_slot = None
        elif self.step == BookingStep.CONTACT_INFO:
            self.step = BookingStep.TIME_SLOTS

    # --- contact info ---

    async def submit(self, form: ClientProfileCreate) -> bool:
        """Validate the form, then book. Returns True on reaching the success step."""
        if self.step != BookingStep.CONTACT_INFO or self.is_submitting:
            return False
        self.form_error = None
        if self.selected_date is None or self.selected_slot is None:
            self.form_error = "Please select a date and time slot"
            return False

        try:
            validate_client_profile(form)
        except InvalidBookingInput as e:
            self.form_error = e.public_message
            return False

        booking = ConsultationCreate(
            first_name=form.first_name.strip(),
            last_name=form.last_name.strip(),
            email=form.email.strip(),
            booking_type=self.booking_type,
            date_booked=self.selected_date.isoformat(),
            time_slot_start=self.selected_slot.start,
            time_slot_end=self.selected_slot.end,
            user_timezone=self.user_timezone,
            user_local_time=self.slot_label(self.selected_slot),
        )

        # stays set until both writes finish
        self.is_submitting = True
        try:
            booked = await self._write_booking(booking, form)
        finally:
            self.is_submitting = False
        if not booked:
            return False

        self.step = BookingStep.SUCCESS
        return True

    async def _write_booking(self, booking: ConsultationCreate, form: ClientProfileCreate) -> bool:
        try:
            result = await create_reservation(self.store, booking)
        except InvalidBookingInput as e:
            self.form_error = e.public_message
            return False
        except BookingSiteError as e:
            logger.error("Booking failed for %s %s: %s", booking.date_booked, booking.time_slot_start, e)
            self.form_error = "Failed to create booking. Please try again."
            return False

        self.reservation_id = result.id
        # the day may now be full
        self.month_cache.drop(self.selected_date.year, self.selected_date.month)

        profile = form.model_copy(update={"booked_record_id": result.id})
        try:
            self.client_profile_id = (await create_client_profile(self.store, profile)).id
        except BookingSiteError as e:
            # The booking stands without its intake record
            logger.error("Client profile not saved for booking %s: %s", result.id, e)
        return True
