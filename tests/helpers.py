import copy
from collections import defaultdict
from datetime import date

from coachbook.core.config import Settings
from coachbook.core.errors import StoreUnavailableError

# Monday
TODAY = date(2025, 11, 17)


def make_settings(**overrides) -> Settings:
    values = {
        "airtable_api_token": "test-token",
        "airtable_base_id": "appTest",
        "airtable_booking_schema": "instant",
        "airtable_time_slots_table": "",
        "business_timezone": "America/New_York",
        "business_start_hour": 9,
        "business_end_hour": 17,
        "slot_duration_minutes": 60,
        "smtp_host": "",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeStore:
    """In-memory stand-in for AirtableStore."""

    def __init__(self, config: Settings | None = None) -> None:
        self.settings = config or make_settings()
        self.tables: dict[str, list[dict]] = defaultdict(list)
        self.calls: list[tuple[str, str]] = []
        self.fail_reads = 0
        self.fail_writes_for: set[str] = set()
        self._next_id = 1

    def add(self, table: str, fields: dict) -> dict:
        record = {"id": f"rec{self._next_id:04d}", "createdTime": "2025-11-01T00:00:00.000Z", "fields": dict(fields)}
        self._next_id += 1
        self.tables[table].append(record)
        return record

    def add_booking(self, instant: str) -> dict:
        return self.add(self.settings.airtable_booked_table, {"dateAndTime": instant})

    def count(self, kind: str, table: str | None = None) -> int:
        return sum(1 for k, t in self.calls if k == kind and (table is None or t == table))

    async def list_records(self, table, fields=None, sort=None, max_records=None):
        self.calls.append(("list", table))
        if self.fail_reads:
            self.fail_reads -= 1
            raise StoreUnavailableError("Airtable returned 503")
        records = copy.deepcopy(self.tables[table])
        for field, direction in reversed(sort or []):
            records.sort(key=lambda r: r["fields"].get(field, ""), reverse=direction == "desc")
        if max_records is not None:
            records = records[:max_records]
        return records

    async def create_record(self, table, fields):
        self.calls.append(("create", table))
        if table in self.fail_writes_for:
            raise StoreUnavailableError("Airtable returned 500")
        return copy.deepcopy(self.add(table, fields))

    async def update_record(self, table, record_id, fields):
        self.calls.append(("update", table))
        for record in self.tables[table]:
            if record["id"] == record_id:
                record["fields"].update(fields)
                return copy.deepcopy(record)
        raise StoreUnavailableError("Airtable returned 404")

    async def aclose(self) -> None:
        pass
