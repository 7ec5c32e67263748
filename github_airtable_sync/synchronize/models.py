"""Data models for synchronization decisions."""

from dataclasses import dataclass, field
from enum import Enum

from githubkit.versions.latest.models import Issue

from github_airtable_sync.synchronize.exceptions import MalformedRecordError


class SyncDecision(str, Enum):
    """What to do with a GitHub issue relative to the Airtable table."""

    CREATE = "create"
    UPDATE = "update"
    NOOP = "noop"


class AirtableField(str, Enum):
    """Airtable column names written for every issue."""

    CREATED_AT = "Created At"
    UPDATED_AT = "Updated At"
    ISSUE_NUMBER = "Issue Number"
    NAME = "Name"
    DESCRIPTION = "Description"
    SOURCE_URL = "Github URL"
    LABELS = "Labels"
    STATUS = "Status"
    ASSIGNED_TO = "Assigned to"


TIMESTAMP_FIELDS: frozenset[str] = frozenset({AirtableField.CREATED_AT.value, AirtableField.UPDATED_AT.value})
"""Fields never compared when deciding whether a record needs an update."""

OPTIONAL_FIELDS: frozenset[str] = frozenset({AirtableField.ASSIGNED_TO.value})
"""Fields omitted from a projection when the issue has no value for them."""


@dataclass(frozen=True)
class IssueUpdate:
    """A GitHub issue paired with the id of the Airtable record it should overwrite."""

    issue: Issue
    record_id: str


@dataclass
class ReconciliationResult:
    """Classification of fetched issues against existing Airtable records."""

    to_insert: list[Issue] = field(default_factory=list)
    to_update: list[IssueUpdate] = field(default_factory=list)
    unchanged: list[Issue] = field(default_factory=list)
    malformed_records: list[MalformedRecordError] = field(default_factory=list)
