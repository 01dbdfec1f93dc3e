from fastapi import APIRouter, Depends, Query, status

from coachbook.api.deps import get_store
from coachbook.api.schemas.booking import CreatedResponse
from coachbook.api.schemas.contact import ContactRequest, TestimonialOut
from coachbook.core.store import AirtableStore
from coachbook.models.contact import ContactSubmission
from coachbook.services.contact_service import create_contact_submission, get_testimonials

router = APIRouter(tags=["contact"])


@router.post("/contact", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def submit_contact(
    body: ContactRequest,
    store: AirtableStore = Depends(get_store),
) -> CreatedResponse:
    record_id = await create_contact_submission(
        store,
        ContactSubmission(
            name=body.name,
            email=body.email,
            phone=body.phone,
            subject=body.subject,
            message=body.message,
        ),
    )
    return CreatedResponse(id=record_id)


@router.get("/testimonials", response_model=list[TestimonialOut])
async def testimonials(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    store: AirtableStore = Depends(get_store),
) -> list[TestimonialOut]:
    items = await get_testimonials(store, limit=limit, offset=offset)
    return [
        TestimonialOut(id=t.id, name=t.name, notes=t.notes, date_created=t.date_created)
        for t in items
    ]
