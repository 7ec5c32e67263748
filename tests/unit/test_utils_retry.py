"""Unit tests for the retry_on_rate_limit decorator."""

import pytest

from github_airtable_sync.airtable.exceptions import AirtableRequestError
from github_airtable_sync.utils.retry import _wait_time_from_headers, retry_on_rate_limit


@pytest.mark.asyncio
async def test_retries_transient_airtable_errors() -> None:
    """Test that 5xx responses are retried until the call succeeds."""
    calls = 0

    @retry_on_rate_limit(max_retries=3, initial_delay=0.0)
    async def flaky() -> str:
        nonlocal calls
        calls += 1
        if calls < 3:
            raise AirtableRequestError(503, "Service Unavailable")
        return "ok"

    assert await flaky() == "ok"
    assert calls == 3


@pytest.mark.asyncio
async def test_gives_up_after_max_retries() -> None:
    """Test that the last error is raised once retries are exhausted."""
    calls = 0

    @retry_on_rate_limit(max_retries=2, initial_delay=0.0)
    async def always_rate_limited() -> None:
        nonlocal calls
        calls += 1
        raise AirtableRequestError(429, "RATE_LIMIT_REACHED", retry_after=0.0)

    with pytest.raises(AirtableRequestError):
        await always_rate_limited()
    assert calls == 3


@pytest.mark.asyncio
async def test_does_not_retry_client_errors() -> None:
    """Test that 4xx errors other than 429 are raised straight away."""
    calls = 0

    @retry_on_rate_limit(max_retries=5, initial_delay=0.0)
    async def invalid() -> None:
        nonlocal calls
        calls += 1
        raise AirtableRequestError(422, "INVALID_VALUE_FOR_COLUMN")

    with pytest.raises(AirtableRequestError):
        await invalid()
    assert calls == 1


def test_rejects_sync_functions() -> None:
    """Test that decorating a plain function fails when it is called."""

    @retry_on_rate_limit()
    def not_async() -> None:
        return None

    with pytest.raises(RuntimeError, match="must be async"):
        not_async()


@pytest.mark.parametrize(
    "headers,expected",
    [
        ({"retry-after": "7"}, 7.0),
        ({"retry-after": "soon"}, 3.0),
        ({}, 3.0),
    ],
)
def test_wait_time_from_headers(headers: dict[str, str], expected: float) -> None:
    """Test that retry-after is preferred and bad values fall back to the default."""
    assert _wait_time_from_headers(headers, 3.0, "fn") == expected


@pytest.mark.asyncio
async def test_server_errors_not_retried_when_disabled() -> None:
    """Test that retry_server_errors=False retries 429 but raises 5xx immediately."""
    statuses = [429, 500]
    calls = 0

    @retry_on_rate_limit(max_retries=5, initial_delay=0.0, retry_server_errors=False)
    async def create() -> None:
        nonlocal calls
        calls += 1
        raise AirtableRequestError(statuses.pop(0), "error")

    with pytest.raises(AirtableRequestError) as exc_info:
        await create()
    assert exc_info.value.status_code == 500
    assert calls == 2
