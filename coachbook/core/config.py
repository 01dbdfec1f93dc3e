from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from project root so it loads regardless of cwd
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Airtable record store. Leave token/base empty to run without a store.
    airtable_api_token: str = ""
    airtable_base_id: str = ""
    airtable_api_url: str = "https://api.airtable.com/v0"
    airtable_booked_table: str = "Booked"
    airtable_contacts_table: str = "Contacts"
    airtable_testimonials_table: str = "Testimonials"
    airtable_clients_table: str = "Clients"
    # Optional per-slot table; when set, booked slot records are flagged too
    airtable_time_slots_table: str = ""
    # "instant": contact fields + dateAndTime (UTC); "fields": decomposed fields only
    airtable_booking_schema: Literal["instant", "fields"] = "instant"
    airtable_timeout_seconds: float = 10.0
    airtable_max_pages: int = 50

    # Slot/booking business rules
    business_timezone: str = "America/New_York"
    business_start_hour: int = 9
    business_end_hour: int = 17  # exclusive, so last slot ends at 17:00
    slot_duration_minutes: int = 60

    # Read retries: attempts after the first try, fixed delay between them
    store_retry_attempts: int = 2
    store_retry_delay_seconds: float = 1.0

    # CORS
    cors_origins: str = "http://localhost:3000"

    # Env
    env: str = "development"

    # Email (SMTP). Leave smtp_host empty to disable sending.
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    from_email: str = ""
    from_name: str = "Financial Coaching"
    site_name: str = "Financial Coaching"
    contact_email: str = ""
    contact_phone: str = ""

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def store_configured(self) -> bool:
        return bool(self.airtable_api_token and self.airtable_base_id)

    @property
    def slots_per_day(self) -> int:
        minutes = (self.business_end_hour - self.business_start_hour) * 60
        return minutes // self.slot_duration_minutes

    @property
    def email_enabled(self) -> bool:
        return bool(self.smtp_host and self.smtp_user and self.smtp_password and self.from_email)


settings = Settings()
