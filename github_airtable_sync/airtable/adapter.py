"""Airtable client adapter for the Airtable REST API over httpx."""

from types import TracebackType
from typing import Any, Self

import httpx
import structlog

from github_airtable_sync.configuration.models import AirtableConfig
from github_airtable_sync.utils.constants import AIRTABLE_MAX_RECORDS_PER_REQUEST, AIRTABLE_RECORDS_PER_PAGE
from github_airtable_sync.utils.retry import retry_on_rate_limit

from .abc import AirtableClientBase
from .client import build_table_url, get_airtable_client
from .exceptions import AirtableRequestError
from .models import AirtableRecord, AirtableRecordPage

logger = structlog.get_logger(__name__)


def _error_message_from_response(response: httpx.Response) -> str:
    """Extract Airtable's error message, which is either a string or an object with a message."""
    try:
        error_data = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    error = error_data.get("error") if isinstance(error_data, dict) else None
    if isinstance(error, dict):
        return str(error.get("message") or error.get("type") or error)
    if error:
        return str(error)
    return response.text or response.reason_phrase


def _retry_after_from_response(response: httpx.Response) -> float | None:
    retry_after = response.headers.get("retry-after")
    if retry_after is None:
        return None
    try:
        return float(retry_after)
    except ValueError:
        return None


class AirtableAdapter(AirtableClientBase):
    """Airtable client adapter bound to a single table."""

    def __init__(self, client: httpx.AsyncClient, table_url: str) -> None:
        """Initialize the Airtable adapter with an already-initialized client."""
        self.client = client
        self.table_url = table_url

    @classmethod
    def create(cls, config: AirtableConfig, transport: httpx.AsyncBaseTransport | None = None) -> Self:
        """Create a new Airtable adapter for the base and table in config."""
        table_url = build_table_url(config.api_url, config.base_id, config.table)
        logger.info("Creating client for Airtable table", api_url=config.api_url, base_id=config.base_id, table=config.table)
        return cls(get_airtable_client(config, transport=transport), table_url)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.close()

    async def _request(self, method: str, params: dict[str, Any] | None = None, json: dict[str, Any] | None = None) -> dict[str, Any]:
        """Send a request to the table endpoint and return the decoded JSON body."""
        response = await self.client.request(method, self.table_url, params=params, json=json)
        if response.is_success:
            return response.json()
        message = _error_message_from_response(response)
        logger.error("Airtable request failed", method=method, url=self.table_url, status_code=response.status_code, message=message)
        raise AirtableRequestError(response.status_code, message, retry_after=_retry_after_from_response(response))

    async def list_records(self, page_size: int = AIRTABLE_RECORDS_PER_PAGE, **kwargs: Any) -> list[AirtableRecord]:
        """List all records of the table, following Airtable's offset cursor."""

        @retry_on_rate_limit(max_retries=5, initial_delay=1.0, max_delay=30.0)
        async def _fetch_page(offset: str | None) -> AirtableRecordPage:
            params: dict[str, Any] = {"pageSize": page_size, **kwargs}
            if offset:
                params["offset"] = offset
            return AirtableRecordPage.model_validate(await self._request("GET", params=params))

        all_records: list[AirtableRecord] = []
        offset: str | None = None
        while True:
            page = await _fetch_page(offset)
            all_records.extend(page.records)
            logger.debug("Fetched page of Airtable records", record_count=len(page.records), total=len(all_records))
            if not page.offset:
                break
            offset = page.offset
        return all_records

    # A 5xx may arrive after the records were stored, so only rate limits are retried.
    @retry_on_rate_limit(max_retries=5, initial_delay=1.0, max_delay=30.0, retry_server_errors=False)
    async def create_records(self, records: list[dict[str, Any]], typecast: bool = True) -> list[AirtableRecord]:
        """Create records from their field mappings; Airtable accepts at most 10 per call."""
        if len(records) > AIRTABLE_MAX_RECORDS_PER_REQUEST:
            raise ValueError(f"Airtable accepts at most {AIRTABLE_MAX_RECORDS_PER_REQUEST} records per request, got {len(records)}")
        payload = {"records": [{"fields": fields} for fields in records], "typecast": typecast}
        data = await self._request("POST", json=payload)
        return AirtableRecordPage.model_validate(data).records

    @retry_on_rate_limit(max_retries=5, initial_delay=1.0, max_delay=30.0)
    async def update_records(self, records: list[tuple[str, dict[str, Any]]], typecast: bool = True) -> list[AirtableRecord]:
        """Update existing records given as (record id, fields) pairs; at most 10 per call.

        PATCH semantics: fields not present in a mapping keep their current value.
        """
        if len(records) > AIRTABLE_MAX_RECORDS_PER_REQUEST:
            raise ValueError(f"Airtable accepts at most {AIRTABLE_MAX_RECORDS_PER_REQUEST} records per request, got {len(records)}")
        payload = {"records": [{"id": record_id, "fields": fields} for record_id, fields in records], "typecast": typecast}
        data = await self._request("PATCH", json=payload)
        return AirtableRecordPage.model_validate(data).records
