import logging

from coachbook.core.errors import InvalidBookingInput
from coachbook.core.store import AirtableStore
from coachbook.models.contact import ContactSubmission, Testimonial

logger = logging.getLogger(__name__)


async def get_testimonials(store: AirtableStore, limit: int = 10, offset: int = 0) -> list[Testimonial]:
    """Newest testimonials first, ``offset`` records skipped."""
    records = await store.list_records(
        store.settings.airtable_testimonials_table,
        sort=[("DateCreated", "desc")],
        max_records=limit + offset,
    )
    return [
        Testimonial(
            id=r["id"],
            name=r.get("fields", {}).get("Name") or "",
            notes=r.get("fields", {}).get("Notes") or "",
            date_created=r.get("fields", {}).get("DateCreated") or "",
        )
        for r in records[offset : offset + limit]
    ]


async def create_contact_submission(store: AirtableStore, data: ContactSubmission) -> str:
    name = (data.name or "").strip()
    email = (data.email or "").strip()
    if not name:
        raise InvalidBookingInput("Name is required")
    if not email:
        raise InvalidBookingInput("Email is required")
    fields = {"Name": name, "Email": email}
    # Optional fields only when they have a value
    for key, value in (("Phone", data.phone), ("Subject", data.subject), ("Message", data.message)):
        if value and value.strip():
            fields[key] = value.strip()
    record = await store.create_record(store.settings.airtable_contacts_table, fields)
    logger.info("Contact submission stored as %s", record["id"])
    return record["id"]
