from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from coachbook.models.client import (
    AgeRange,
    ContactMethod,
    DebtType,
    EmploymentStatus,
    ReasonForVisit,
    RelationshipStatus,
)
from coachbook.models.consultation import BookingType


class CamelModel(BaseModel):
    """Wire format uses the camelCase names of the site's forms."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TimeSlotOut(CamelModel):
    start: str
    end: str
    available: bool


class BookingRequest(CamelModel):
    first_name: str
    last_name: str
    email: EmailStr
    booking_type: BookingType = BookingType.FREE
    date_booked: str  # YYYY-MM-DD
    time_slot_start: str  # HH:MM business timezone
    time_slot_end: str
    user_timezone: str | None = None
    user_local_time: str | None = None


class BookingResponse(CamelModel):
    id: str
    success: bool
    date_and_time: str | None = None


class AttachmentIn(CamelModel):
    url: str
    filename: str | None = None


class ClientRequest(CamelModel):
    first_name: str
    last_name: str
    email: EmailStr
    phone: str | None = None
    relationship: RelationshipStatus | None = None
    household_size: int | None = None
    age_range: AgeRange | None = None
    employment_status: EmploymentStatus | None = None
    reason_for_visit: ReasonForVisit | None = None
    primary_financial_concern: str | None = None
    current_debt_type: list[DebtType] = Field(default_factory=list)
    preferred_contact_method: ContactMethod | None = None
    best_time_to_contact: str | None = None
    consent: bool = False
    booked_record_id: str | None = None
    attachments: list[AttachmentIn] = Field(default_factory=list)


class CreatedResponse(BaseModel):
    id: str
    success: bool = True
