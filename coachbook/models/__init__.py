from coachbook.models.slot import TimeSlot
from coachbook.models.consultation import BookingType, ConsultationCreate, ReservationResult
from coachbook.models.client import (
    AgeRange,
    Attachment,
    ClientProfileCreate,
    ClientProfileResult,
    ContactMethod,
    DebtType,
    EmploymentStatus,
    ReasonForVisit,
    RelationshipStatus,
)
from coachbook.models.contact import ContactSubmission, Testimonial

__all__ = [
    "TimeSlot",
    "BookingType",
    "ConsultationCreate",
    "ReservationResult",
    "AgeRange",
    "Attachment",
    "ClientProfileCreate",
    "ClientProfileResult",
    "ContactMethod",
    "DebtType",
    "EmploymentStatus",
    "ReasonForVisit",
    "RelationshipStatus",
    "ContactSubmission",
    "Testimonial",
]
