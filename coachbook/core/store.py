import logging
from typing import Any
from urllib.parse import quote

import httpx

from coachbook.core.config import Settings, settings as default_settings
from coachbook.core.errors import StoreConfigurationError, StoreUnavailableError

logger = logging.getLogger(__name__)

Record = dict[str, Any]

# Airtable caps pageSize at 100
_PAGE_SIZE = 100


class AirtableStore:
    """Thin async client for the Airtable REST API.

    One instance per process: created in the app lifespan, closed on shutdown.
    Records are plain dicts shaped like ``{"id", "createdTime", "fields"}``.
    """

    def __init__(self, config: Settings | None = None, client: httpx.AsyncClient | None = None) -> None:
        self.settings = config or default_settings
        self._client = client
        self._owns_client = client is None

    @property
    def configured(self) -> bool:
        return self.settings.store_configured

    def _require_client(self) -> httpx.AsyncClient:
        if not self.configured:
            raise StoreConfigurationError(
                "Airtable credentials are not configured. Set AIRTABLE_API_TOKEN and AIRTABLE_BASE_ID."
            )
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"{self.settings.airtable_api_url.rstrip('/')}/{self.settings.airtable_base_id}",
                headers={"Authorization": f"Bearer {self.settings.airtable_api_token}"},
                timeout=self.settings.airtable_timeout_seconds,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def _request(self, method: str, table: str, **kwargs: Any) -> dict:
        client = self._require_client()
        try:
            resp = await client.request(method, f"/{quote(table, safe='')}", **kwargs)
        except httpx.HTTPError as e:
            logger.warning("Airtable %s %s failed: %s", method, table, e)
            raise StoreUnavailableError(f"Airtable request failed: {type(e).__name__}") from e
        if resp.status_code >= 400:
            logger.warning(
                "Airtable %s %s returned status=%s body=%s",
                method,
                table,
                resp.status_code,
                resp.text[:500],
            )
            raise StoreUnavailableError(f"Airtable returned {resp.status_code}")
        return resp.json()

    async def list_records(
        self,
        table: str,
        fields: list[str] | None = None,
        sort: list[tuple[str, str]] | None = None,
        max_records: int | None = None,
    ) -> list[Record]:
        """Fetch every record of ``table``, following pagination offsets."""
        params: list[tuple[str, str]] = [("pageSize", str(_PAGE_SIZE))]
        for name in fields or []:
            params.append(("fields[]", name))
        for i, (field, direction) in enumerate(sort or []):
            params.append((f"sort[{i}][field]", field))
            params.append((f"sort[{i}][direction]", direction))
        if max_records is not None:
            params.append(("maxRecords", str(max_records)))

        records: list[Record] = []
        offset: str | None = None
        for _ in range(self.settings.airtable_max_pages):
            page_params = params + ([("offset", offset)] if offset else [])
            data = await self._request("GET", table, params=page_params)
            records.extend(data.get("records", []))
            offset = data.get("offset")
            if not offset:
                break
        else:
            logger.warning("Airtable %s: stopped after %d pages", table, self.settings.airtable_max_pages)
        return records

    async def create_record(self, table: str, fields: dict[str, Any]) -> Record:
        data = await self._request(
            "POST",
            table,
            json={"records": [{"fields": fields}], "typecast": True},
        )
        return data["records"][0]

    async def update_record(self, table: str, record_id: str, fields: dict[str, Any]) -> Record:
        data = await self._request(
            "PATCH",
            table,
            json={"records": [{"id": record_id, "fields": fields}], "typecast": True},
        )
        return data["records"][0]
