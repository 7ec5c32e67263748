"""Retry decorator for handling GitHub and Airtable API rate limits and transient errors.

This module provides a decorator that implements retry logic for remote API calls,
including respect for rate limit headers and exponential backoff.
"""

import asyncio
import functools
import inspect
import time
from typing import Any, Callable, TypeVar

import structlog
from githubkit.exception import PrimaryRateLimitExceeded, RequestFailed, SecondaryRateLimitExceeded

from github_airtable_sync.airtable.exceptions import AirtableRequestError

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _wait_time_from_headers(headers: Any, default: float, function_name: str) -> float:
    """Derive a wait time from retry-after or x-ratelimit-reset headers, falling back to default."""
    retry_after = headers.get("retry-after")
    if retry_after:
        try:
            wait_time = float(retry_after)
            logger.info("Using retry-after header value", retry_after=wait_time, function=function_name)
            return wait_time
        except ValueError:
            logger.warning("Invalid retry-after header value", retry_after=retry_after, function=function_name)
            return default

    rate_limit_reset = headers.get("x-ratelimit-reset")
    if rate_limit_reset:
        try:
            reset_timestamp = int(rate_limit_reset)
            current_timestamp = int(time.time())
            if reset_timestamp > current_timestamp:
                wait_time = reset_timestamp - current_timestamp + 1
                logger.info("Using x-ratelimit-reset header", wait_time=wait_time, function=function_name)
                return wait_time
        except ValueError:
            logger.warning("Invalid x-ratelimit-reset header value", rate_limit_reset=rate_limit_reset, function=function_name)
    return default


def retry_on_rate_limit(
    max_retries: int = 100,
    initial_delay: float = 10.0,
    max_delay: float = 300.0,
    exponential_base: float = 2.0,
    retry_server_errors: bool = True,
) -> Callable[[F], F]:
    """Decorator for retrying async functions when they encounter API rate limits.

    This decorator handles:
    - GitHub primary and secondary rate limit errors (403/429)
    - Airtable rate limit (429) and server (5xx) errors
    - Respects retry-after and x-ratelimit-reset headers
    - Implements exponential backoff when no header is available

    Args:
        max_retries: Maximum number of retry attempts (default: 100)
        initial_delay: Initial delay in seconds between retries (default: 10.0)
        max_delay: Maximum delay in seconds between retries (default: 300.0)
        exponential_base: Base for exponential backoff calculation (default: 2.0)
        retry_server_errors: Retry Airtable 5xx responses as well as 429 (default: True).
            Disable for requests that are not idempotent, such as record creation.

    Returns:
        Decorated function with retry logic

    Example:
        @retry_on_rate_limit(max_retries=5, initial_delay=1.0)
        async def list_records(self):
            return await self.client.get(...)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            last_exception: Exception | None = None
            delay = initial_delay

            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except (PrimaryRateLimitExceeded, SecondaryRateLimitExceeded) as e:
                    last_exception = e

                    if attempt == max_retries:
                        logger.error(
                            "Max retries reached for GitHub rate limit error",
                            function=func.__name__,
                            attempt=attempt + 1,
                            error_type=type(e).__name__,
                            retry_after=str(e.retry_after) if hasattr(e, "retry_after") else "unknown",
                        )
                        raise

                    if hasattr(e, "retry_after") and e.retry_after:
                        wait_time = min(e.retry_after.total_seconds(), max_delay)
                    else:
                        wait_time = min(delay, max_delay)

                    logger.warning(
                        f"GitHub rate limit exceeded, waiting {wait_time} seconds",
                        function=func.__name__,
                        rate_limit_type="primary" if isinstance(e, PrimaryRateLimitExceeded) else "secondary",
                        attempt=attempt + 1,
                        max_retries=max_retries,
                        wait_time=wait_time,
                    )
                    await asyncio.sleep(wait_time)
                    delay = min(delay * exponential_base, max_delay)

                except RequestFailed as e:
                    last_exception = e

                    is_rate_limit = e.response.status_code in (403, 429)
                    is_secondary_rate_limit = e.response.status_code == 403 and "rate limit" in str(e).lower()
                    if not (is_rate_limit or is_secondary_rate_limit):
                        raise

                    if attempt == max_retries:
                        logger.error(
                            "Max retries reached for rate limit error",
                            function=func.__name__,
                            attempt=attempt + 1,
                            status_code=e.response.status_code,
                            error=str(e),
                        )
                        raise

                    wait_time = min(_wait_time_from_headers(e.response.headers, delay, func.__name__), max_delay)
                    logger.warning(
                        f"Rate limit hit, retrying in {wait_time} seconds",
                        function=func.__name__,
                        attempt=attempt + 1,
                        max_retries=max_retries,
                        wait_time=wait_time,
                        status_code=e.response.status_code,
                    )
                    await asyncio.sleep(wait_time)
                    delay = min(delay * exponential_base, max_delay)

                except AirtableRequestError as e:
                    last_exception = e

                    if not e.is_retryable or (e.is_server_error and not retry_server_errors):
                        raise

                    if attempt == max_retries:
                        logger.error(
                            "Max retries reached for Airtable error",
                            function=func.__name__,
                            attempt=attempt + 1,
                            status_code=e.status_code,
                            error=str(e),
                        )
                        raise

                    if e.retry_after is not None:
                        wait_time = min(e.retry_after, max_delay)
                    else:
                        wait_time = min(delay, max_delay)

                    logger.warning(
                        f"Airtable request failed, retrying in {wait_time} seconds",
                        function=func.__name__,
                        attempt=attempt + 1,
                        max_retries=max_retries,
                        wait_time=wait_time,
                        status_code=e.status_code,
                    )
                    await asyncio.sleep(wait_time)
                    delay = min(delay * exponential_base, max_delay)

                except Exception as e:
                    logger.error(
                        "Unexpected error in rate limit retry decorator",
                        function=func.__name__,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    raise

            # Should never reach here, but just in case
            if last_exception:
                raise last_exception

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            """Sync version of the retry wrapper - raises error since we only support async."""
            raise RuntimeError(
                f"Function {func.__name__} decorated with @retry_on_rate_limit must be async. This decorator only supports async functions."
            )

        if inspect.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        else:
            return sync_wrapper  # type: ignore

    return decorator
