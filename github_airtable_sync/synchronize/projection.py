"""Projects GitHub issues onto the flat Airtable field schema."""

from datetime import datetime
from typing import Any

from githubkit.versions.latest.models import Issue

from github_airtable_sync.synchronize.models import AirtableField
from github_airtable_sync.synchronize.types import HasLogin, ProjectedFields
from github_airtable_sync.synchronize.utils import ordered_label_names
from github_airtable_sync.utils.constants import LABEL_SEPARATOR
from github_airtable_sync.utils.helpers import format_assignee_handle


def _format_timestamp(value: datetime | str | None) -> str | None:
    """Render timestamps as ISO-8601 strings with a trailing Z for UTC, as GitHub returns them."""
    if isinstance(value, datetime):
        return value.isoformat().replace("+00:00", "Z")
    return value


def _state_value(state: Any) -> str | None:
    return getattr(state, "value", state)


def _assignee_login(assignee: Any) -> str | None:
    if isinstance(assignee, HasLogin):
        return assignee.login
    if isinstance(assignee, dict):
        return assignee.get("login")
    return None


def project_issue(issue: Issue) -> ProjectedFields:
    """Map one GitHub issue to the Airtable fields it is stored as.

    Labels are joined with commas in their original order, which is lossy for
    label names that contain a comma. The assignee field is only present when
    the issue has an assignee.
    """
    fields: ProjectedFields = {
        AirtableField.CREATED_AT.value: _format_timestamp(issue.created_at),
        AirtableField.UPDATED_AT.value: _format_timestamp(issue.updated_at),
        AirtableField.ISSUE_NUMBER.value: issue.number,
        AirtableField.NAME.value: issue.title,
        AirtableField.DESCRIPTION.value: issue.body,
        AirtableField.SOURCE_URL.value: issue.html_url,
        AirtableField.LABELS.value: LABEL_SEPARATOR.join(ordered_label_names(issue.labels)),
        AirtableField.STATUS.value: _state_value(issue.state),
    }
    login = _assignee_login(issue.assignee)
    if login:
        fields[AirtableField.ASSIGNED_TO.value] = format_assignee_handle(login)
    return fields
