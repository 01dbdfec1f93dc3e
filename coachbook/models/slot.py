from sqlmodel import SQLModel


class TimeSlot(SQLModel):
    """One bookable window, wall-clock times in the business timezone."""

    start: str  # HH:MM
    end: str  # HH:MM
    available: bool = True
