"""Configuration models shared by the CLI and the synchronization workflow."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from github_airtable_sync.utils.constants import DEFAULT_AIRTABLE_API_URL, DEFAULT_GITHUB_API_URL, DEFAULT_SYNC_TIMEOUT


class GitHubAuthenticationType(str, Enum):
    """Enum for GitHub authentication types."""

    PAT = "pat"
    APP = "app"


class IssueState(str, Enum):
    """Issue lifecycle states that can be synchronized."""

    OPEN = "open"
    CLOSED = "closed"
    ALL = "all"


@dataclass(frozen=True)
class AirtableConfig:
    """Location of and credentials for the destination Airtable table."""

    api_key: str
    base_id: str
    table: str
    api_url: str = DEFAULT_AIRTABLE_API_URL


@dataclass(frozen=True)
class SyncConfig:
    """Immutable configuration for a single GitHub to Airtable synchronization run."""

    repo: str
    state: IssueState
    github_authentication_type: GitHubAuthenticationType
    airtable: AirtableConfig
    github_pat_token: str | None = None
    github_app_id: int | None = None
    github_app_private_key_path: Path | None = None
    github_app_installation_id: int | None = None
    github_api_url: str = DEFAULT_GITHUB_API_URL
    timeout_seconds: float = DEFAULT_SYNC_TIMEOUT
    debug: bool = False
