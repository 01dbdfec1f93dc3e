from pydantic import BaseModel, ConfigDict, Field

from coachbook.api.schemas.booking import CamelModel


class ContactRequest(BaseModel):
    """Body keys are capitalised to match the Contacts table columns."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(alias="Name")
    email: str = Field(alias="Email")
    phone: str | None = Field(default=None, alias="Phone")
    subject: str | None = Field(default=None, alias="Subject")
    message: str | None = Field(default=None, alias="Message")


class TestimonialOut(CamelModel):
    id: str
    name: str
    notes: str
    date_created: str


class TimezoneOut(BaseModel):
    key: str
    timezone: str
    name: str
