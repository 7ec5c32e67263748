"""Contains unit tests for reconciling GitHub issues against Airtable records."""

from typing import Any, Callable

import pytest

from github_airtable_sync.airtable.models import AirtableRecord
from github_airtable_sync.synchronize.exceptions import DuplicateIssueNumberError, MalformedRecordError
from github_airtable_sync.synchronize.models import SyncDecision
from github_airtable_sync.synchronize.projection import project_issue
from github_airtable_sync.synchronize.reconcile import (
    build_record_index,
    decide_issue_sync_action,
    reconcile_issues,
    record_issue_number,
)


def record_for(issue: Any, record_id: str = "rec1", **overrides: Any) -> AirtableRecord:
    """Build an Airtable record holding an issue's projection, as Airtable would return it."""
    fields = {key: value for key, value in project_issue(issue).items() if value not in (None, "")}
    fields.update(overrides)
    return AirtableRecord(id=record_id, fields={key: value for key, value in fields.items() if value is not None})


@pytest.mark.parametrize(
    "value,expected",
    [
        pytest.param(5, 5, id="integer"),
        pytest.param(5.0, 5, id="number column float"),
        pytest.param("5", 5, id="text column"),
        pytest.param(" 12 ", 12, id="text column with whitespace"),
    ],
)
def test_record_issue_number(value: Any, expected: int) -> None:
    """Test that integral issue numbers of any stored type are accepted."""
    assert record_issue_number(AirtableRecord(id="rec1", fields={"Issue Number": value})) == expected


@pytest.mark.parametrize(
    "fields",
    [
        pytest.param({}, id="missing"),
        pytest.param({"Issue Number": ""}, id="empty string"),
        pytest.param({"Issue Number": "abc"}, id="not a number"),
        pytest.param({"Issue Number": 5.5}, id="fractional"),
        pytest.param({"Issue Number": True}, id="boolean"),
        pytest.param({"Issue Number": ["5"]}, id="list"),
    ],
)
def test_record_issue_number_malformed(fields: dict[str, Any]) -> None:
    """Test that unusable issue numbers raise MalformedRecordError naming the record."""
    with pytest.raises(MalformedRecordError) as exc_info:
        record_issue_number(AirtableRecord(id="recBad", fields=fields))
    assert exc_info.value.record_id == "recBad"


def test_build_record_index_rejects_duplicates() -> None:
    """Test that two records with the same issue number are rejected."""
    records = [
        AirtableRecord(id="recA", fields={"Issue Number": 3}),
        AirtableRecord(id="recB", fields={"Issue Number": 3.0}),
    ]
    with pytest.raises(DuplicateIssueNumberError) as exc_info:
        build_record_index(records)
    assert exc_info.value.issue_number == 3
    assert exc_info.value.record_ids == ["recA", "recB"]


def test_build_record_index_skips_malformed_records() -> None:
    """Test that malformed records are reported but do not stop indexing."""
    records = [
        AirtableRecord(id="recA", fields={"Issue Number": 1}),
        AirtableRecord(id="recB", fields={"Name": "no number"}),
        AirtableRecord(id="recC", fields={"Issue Number": 2}),
    ]
    index, malformed = build_record_index(records)
    assert sorted(index) == [1, 2]
    assert [error.record_id for error in malformed] == ["recB"]


@pytest.mark.asyncio
async def test_decide_issue_sync_action_create_when_no_record(make_issue: Callable[..., Any]) -> None:
    """Test that an issue without a record is created."""
    assert await decide_issue_sync_action(make_issue(), None) == SyncDecision.CREATE


@pytest.mark.asyncio
async def test_decide_issue_sync_action_noop_when_identical(make_issue: Callable[..., Any]) -> None:
    """Test that an issue matching its record needs nothing."""
    issue = make_issue(labels=["bug"], assignee="alice")
    assert await decide_issue_sync_action(issue, record_for(issue)) == SyncDecision.NOOP


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        pytest.param({"Name": "Old title"}, id="title"),
        pytest.param({"Description": "Old body"}, id="body"),
        pytest.param({"Status": "closed"}, id="status"),
        pytest.param({"Github URL": "https://github.com/o/r/issues/999"}, id="url"),
        pytest.param({"Assigned to": "@bob"}, id="assignee"),
        pytest.param({"Labels": ["bug", "ui"]}, id="labels"),
    ],
)
async def test_decide_issue_sync_action_update_when_field_differs(make_issue: Callable[..., Any], overrides: dict[str, Any]) -> None:
    """Test that a difference in any non-timestamp field triggers an update."""
    issue = make_issue(labels=["bug"], assignee="alice")
    assert await decide_issue_sync_action(issue, record_for(issue, **overrides)) == SyncDecision.UPDATE


@pytest.mark.asyncio
async def test_decide_issue_sync_action_update_when_assignee_removed(make_issue: Callable[..., Any]) -> None:
    """Test that a record still holding an assignee is updated once the issue is unassigned."""
    issue = make_issue(assignee=None)
    assert await decide_issue_sync_action(issue, record_for(issue, **{"Assigned to": "@alice"})) == SyncDecision.UPDATE


@pytest.mark.asyncio
async def test_decide_issue_sync_action_empty_assignee_equals_absent(make_issue: Callable[..., Any]) -> None:
    """Test that an empty stored assignee is treated the same as no assignee."""
    issue = make_issue(assignee=None)
    assert await decide_issue_sync_action(issue, record_for(issue, **{"Assigned to": ""})) == SyncDecision.NOOP


@pytest.mark.asyncio
async def test_decide_issue_sync_action_ignores_timestamps(make_issue: Callable[..., Any]) -> None:
    """Test that timestamp-only differences never trigger an update."""
    issue = make_issue(labels=["bug"])
    record = record_for(issue, **{"Created At": "2000-01-01T00:00:00.000Z", "Updated At": "2000-01-01T00:00:00.000Z"})
    assert await decide_issue_sync_action(issue, record) == SyncDecision.NOOP


@pytest.mark.asyncio
async def test_decide_issue_sync_action_accepts_text_issue_number(make_issue: Callable[..., Any]) -> None:
    """Test that an issue number stored as text matches the integer issue number."""
    issue = make_issue(number=12)
    assert await decide_issue_sync_action(issue, record_for(issue, **{"Issue Number": "12"})) == SyncDecision.NOOP


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "stored_labels,issue_labels,expected",
    [
        pytest.param(["bug", "ui"], ["ui", "bug"], SyncDecision.NOOP, id="reordered"),
        pytest.param(["bug"], [], SyncDecision.UPDATE, id="non-empty to empty"),
        pytest.param([], [], SyncDecision.NOOP, id="empty to empty"),
        pytest.param(None, [], SyncDecision.NOOP, id="absent to empty"),
    ],
)
async def test_decide_issue_sync_action_label_sets(
    make_issue: Callable[..., Any], stored_labels: list[str] | None, issue_labels: list[str], expected: SyncDecision
) -> None:
    """Test the order-independent label comparison against a multiple select column."""
    issue = make_issue(labels=issue_labels)
    record = record_for(issue, Labels=stored_labels)
    assert await decide_issue_sync_action(issue, record) == expected


@pytest.mark.asyncio
async def test_reconcile_issues_empty_table_inserts_everything(make_issue: Callable[..., Any]) -> None:
    """Test that every issue is inserted when the table is empty."""
    issues = [make_issue(number=n) for n in range(1, 4)]
    result = await reconcile_issues(issues, [])
    assert result.to_insert == issues
    assert result.to_update == []
    assert result.unchanged == []


@pytest.mark.asyncio
async def test_reconcile_issues_identical_table_is_noop(make_issue: Callable[..., Any]) -> None:
    """Test that nothing is written when every record already matches."""
    issues = [make_issue(number=1, labels=["bug", "ui"]), make_issue(number=2, assignee="alice", state="closed")]
    records = [record_for(issue, record_id=f"rec{issue.number}", Labels=issue_labels) for issue, issue_labels in zip(issues, (["ui", "bug"], None))]
    result = await reconcile_issues(issues, records)
    assert result.to_insert == []
    assert result.to_update == []
    assert result.unchanged == issues


@pytest.mark.asyncio
async def test_reconcile_issues_partitions(make_issue: Callable[..., Any]) -> None:
    """Test that new, changed, and unchanged issues are partitioned and disjoint."""
    new_issue = make_issue(number=1)
    changed_issue = make_issue(number=2, title="New title")
    same_issue = make_issue(number=3)
    records = [
        record_for(changed_issue, record_id="rec2", Name="Old title"),
        record_for(same_issue, record_id="rec3"),
        AirtableRecord(id="rec9", fields={"Issue Number": 9, "Name": "Only in Airtable"}),
    ]

    result = await reconcile_issues([new_issue, changed_issue, same_issue], records)

    assert result.to_insert == [new_issue]
    assert [(update.issue, update.record_id) for update in result.to_update] == [(changed_issue, "rec2")]
    assert result.unchanged == [same_issue]


@pytest.mark.asyncio
async def test_reconcile_issues_reports_malformed_records(make_issue: Callable[..., Any]) -> None:
    """Test that malformed records are reported and their issues treated as new."""
    issue = make_issue(number=1)
    result = await reconcile_issues([issue], [AirtableRecord(id="recX", fields={"Issue Number": "one"})])
    assert result.to_insert == [issue]
    assert [error.record_id for error in result.malformed_records] == ["recX"]


@pytest.mark.asyncio
async def test_reconcile_issues_raises_on_duplicate_issue_numbers(make_issue: Callable[..., Any]) -> None:
    """Test that duplicate join keys in Airtable are rejected instead of silently picking one."""
    issue = make_issue(number=1)
    with pytest.raises(DuplicateIssueNumberError):
        await reconcile_issues([issue], [record_for(issue, record_id="recA"), record_for(issue, record_id="recB")])
