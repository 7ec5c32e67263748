"""Sets up the authenticated httpx client for the Airtable REST API."""

from urllib.parse import quote

import httpx

from github_airtable_sync.configuration.models import AirtableConfig
from github_airtable_sync.utils.constants import AIRTABLE_REQUEST_TIMEOUT


def build_table_url(api_url: str, base_id: str, table: str) -> str:
    """Returns the REST endpoint of a table; table names may contain spaces."""
    return f"{api_url.rstrip('/')}/{quote(base_id, safe='')}/{quote(table, safe='')}"


def get_airtable_client(config: AirtableConfig, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Returns an httpx client authenticated against the Airtable API with a bearer token."""
    if not config.api_key:
        raise RuntimeError("Airtable authentication requires an API key in config.")
    return httpx.AsyncClient(
        headers={
            "Authorization": f"Bearer {config.api_key}",
            "Content-Type": "application/json",
        },
        timeout=AIRTABLE_REQUEST_TIMEOUT,
        transport=transport,
    )
