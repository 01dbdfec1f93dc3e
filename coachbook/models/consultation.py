from enum import Enum

from sqlmodel import SQLModel


class BookingType(str, Enum):
    FREE = "Free Consultation"
    PAID = "Paid Consultation"


class ConsultationCreate(SQLModel):
    first_name: str
    last_name: str
    email: str
    booking_type: BookingType = BookingType.FREE
    date_booked: str  # YYYY-MM-DD, business timezone
    time_slot_start: str  # HH:MM, business timezone
    time_slot_end: str | None = None
    user_timezone: str | None = None
    user_local_time: str | None = None


class ReservationResult(SQLModel):
    id: str
    success: bool = True
    date_and_time: str | None = None  # UTC ISO instant, "instant" schema only
