from sqlmodel import SQLModel


class ContactSubmission(SQLModel):
    name: str
    email: str
    phone: str | None = None
    subject: str | None = None
    message: str | None = None


class Testimonial(SQLModel):
    id: str
    name: str = ""
    notes: str = ""
    date_created: str = ""
