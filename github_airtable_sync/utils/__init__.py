"""Utility modules for shared functionality."""

from .constants import (
    AIRTABLE_MAX_RECORDS_PER_REQUEST,
    AIRTABLE_RECORDS_PER_PAGE,
    DEFAULT_AIRTABLE_API_URL,
    DEFAULT_GITHUB_API_URL,
    GITHUB_ISSUES_PER_PAGE,
)
from .helpers import chunked
from .retry import retry_on_rate_limit

__all__ = [
    "AIRTABLE_MAX_RECORDS_PER_REQUEST",
    "AIRTABLE_RECORDS_PER_PAGE",
    "DEFAULT_AIRTABLE_API_URL",
    "DEFAULT_GITHUB_API_URL",
    "GITHUB_ISSUES_PER_PAGE",
    "chunked",
    "retry_on_rate_limit",
]
