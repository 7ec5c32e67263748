"""Classifies GitHub issues as new, changed, or unchanged relative to Airtable records."""

from typing import Sequence

import structlog
from githubkit.versions.latest.models import Issue

from github_airtable_sync.airtable.models import AirtableRecord
from github_airtable_sync.synchronize.exceptions import DuplicateIssueNumberError, MalformedRecordError
from github_airtable_sync.synchronize.models import TIMESTAMP_FIELDS, AirtableField, IssueUpdate, ReconciliationResult, SyncDecision
from github_airtable_sync.synchronize.projection import project_issue
from github_airtable_sync.synchronize.utils import compare_airtable_field, compare_label_sets

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

COMPARED_FIELDS: tuple[str, ...] = tuple(field.value for field in AirtableField if field.value not in TIMESTAMP_FIELDS)
"""Fields compared when deciding whether an existing record needs an update, in comparison order."""


def record_issue_number(record: AirtableRecord) -> int:
    """Return the issue number stored in a record.

    Airtable number columns return floats and text columns return strings, so
    integral values of either kind are accepted.

    Raises:
        MalformedRecordError: If the record has no usable issue number.
    """
    value = record.fields.get(AirtableField.ISSUE_NUMBER.value)
    if value is None or value == "":
        raise MalformedRecordError(record.id, "missing issue number")
    if isinstance(value, bool):
        raise MalformedRecordError(record.id, f"issue number has unexpected type {type(value).__name__}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise MalformedRecordError(record.id, f"issue number {value} is not an integer")
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise MalformedRecordError(record.id, f"issue number '{value}' is not an integer") from None
    raise MalformedRecordError(record.id, f"issue number has unexpected type {type(value).__name__}")


def build_record_index(records: Sequence[AirtableRecord]) -> tuple[dict[int, AirtableRecord], list[MalformedRecordError]]:
    """Index records by issue number.

    Records without a usable issue number are left out of the index and returned
    alongside it.

    Raises:
        DuplicateIssueNumberError: If two records hold the same issue number.
    """
    index: dict[int, AirtableRecord] = {}
    malformed: list[MalformedRecordError] = []
    for record in records:
        try:
            issue_number = record_issue_number(record)
        except MalformedRecordError as exc:
            logger.warning("Skipping malformed Airtable record", record_id=record.id, reason=exc.reason)
            malformed.append(exc)
            continue
        existing = index.get(issue_number)
        if existing is not None:
            raise DuplicateIssueNumberError(issue_number, [existing.id, record.id])
        index[issue_number] = record
    return index, malformed


async def decide_issue_sync_action(issue: Issue, record: AirtableRecord | None = None) -> SyncDecision:
    """Compare a GitHub issue and an Airtable record, and decide whether to create, update, or no-op.

    Key is issue number. Timestamps are not compared.
    """
    if record is None:
        logger.debug("Issue not found in Airtable", issue_number=issue.number)
        return SyncDecision.CREATE

    projected = project_issue(issue)
    for field in COMPARED_FIELDS:
        projected_value = projected.get(field)
        airtable_value = record.fields.get(field)
        if field == AirtableField.ISSUE_NUMBER.value:
            try:
                airtable_value = record_issue_number(record)
            except MalformedRecordError:
                # Unusable numbers are compared as stored and will differ.
                pass
        if field == AirtableField.LABELS.value:
            decision = await compare_label_sets(projected_value, airtable_value)
        else:
            decision = await compare_airtable_field(projected_value, airtable_value)
        if decision == SyncDecision.UPDATE:
            logger.info(
                "Issue needs to be updated",
                issue_number=issue.number,
                record_id=record.id,
                issue_field=field,
                current_value=airtable_value,
                new_value=projected_value,
            )
            return SyncDecision.UPDATE

    logger.debug("Issue is up to date", issue_number=issue.number, record_id=record.id)
    return SyncDecision.NOOP


async def reconcile_issues(issues: Sequence[Issue], records: Sequence[AirtableRecord]) -> ReconciliationResult:
    """Split issues into those to insert, those to update, and those already up to date.

    Raises:
        DuplicateIssueNumberError: If the Airtable table holds duplicate issue numbers.
    """
    record_by_issue_number, malformed_records = build_record_index(records)
    result = ReconciliationResult(malformed_records=malformed_records)

    for issue in issues:
        record = record_by_issue_number.get(issue.number)
        decision = await decide_issue_sync_action(issue, record)
        if record is None or decision == SyncDecision.CREATE:
            result.to_insert.append(issue)
        elif decision == SyncDecision.UPDATE:
            result.to_update.append(IssueUpdate(issue=issue, record_id=record.id))
        else:
            result.unchanged.append(issue)

    logger.info(
        "Reconciled issues against Airtable records",
        issue_count=len(issues),
        record_count=len(records),
        to_insert=len(result.to_insert),
        to_update=len(result.to_update),
        unchanged=len(result.unchanged),
        malformed_records=len(malformed_records),
    )
    return result
