from fastapi import APIRouter, BackgroundTasks, Depends, status

from coachbook.api.deps import get_store
from coachbook.api.schemas.booking import BookingRequest, BookingResponse, ClientRequest, CreatedResponse
from coachbook.core.store import AirtableStore
from coachbook.models.client import Attachment, ClientProfileCreate
from coachbook.models.consultation import ConsultationCreate
from coachbook.services.booking_service import create_client_profile, create_reservation
from coachbook.services.email_service import send_booking_confirmation_email

router = APIRouter(tags=["bookings"])


@router.post("/bookings", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    body: BookingRequest,
    background_tasks: BackgroundTasks,
    store: AirtableStore = Depends(get_store),
) -> BookingResponse:
    data = ConsultationCreate(
        first_name=body.first_name,
        last_name=body.last_name,
        email=str(body.email),
        booking_type=body.booking_type,
        date_booked=body.date_booked,
        time_slot_start=body.time_slot_start,
        time_slot_end=body.time_slot_end,
        user_timezone=body.user_timezone,
        user_local_time=body.user_local_time,
    )
    result = await create_reservation(store, data)
    # Confirmation email in background (uses sync SMTP)
    background_tasks.add_task(send_booking_confirmation_email, data)
    return BookingResponse(id=result.id, success=result.success, date_and_time=result.date_and_time)


@router.post("/clients", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    body: ClientRequest,
    store: AirtableStore = Depends(get_store),
) -> CreatedResponse:
    data = ClientProfileCreate(
        first_name=body.first_name,
        last_name=body.last_name,
        email=str(body.email),
        phone=body.phone,
        relationship=body.relationship,
        household_size=body.household_size,
        age_range=body.age_range,
        employment_status=body.employment_status,
        reason_for_visit=body.reason_for_visit,
        primary_financial_concern=body.primary_financial_concern,
        debt_types=body.current_debt_type,
        preferred_contact_method=body.preferred_contact_method,
        best_time_to_contact=body.best_time_to_contact,
        consent=body.consent,
        booked_record_id=body.booked_record_id,
        attachments=[Attachment(url=a.url, filename=a.filename) for a in body.attachments],
    )
    result = await create_client_profile(store, data)
    return CreatedResponse(id=result.id, success=result.success)
