"""Exceptions raised while synchronizing GitHub issues into Airtable."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from github_airtable_sync.synchronize.results import BatchWriteResult


class SyncError(Exception):
    """Base class for errors raised during a synchronization run."""

    def to_dict(self) -> dict[str, Any]:
        """Summarize the error for SyncResult.errors."""
        return {"error_type": type(self).__name__, "message": str(self)}


class SourceFetchError(SyncError):
    """Raised when issues could not be fetched from GitHub."""

    pass


class DestinationFetchError(SyncError):
    """Raised when existing records could not be fetched from Airtable."""

    pass


class DuplicateIssueNumberError(SyncError):
    """Raised when more than one Airtable record holds the same issue number."""

    def __init__(self, issue_number: int, record_ids: list[str]) -> None:
        """Initializes the exception with the duplicated issue number and the records holding it."""
        super().__init__(f"Issue number {issue_number} appears in more than one Airtable record: {', '.join(record_ids)}")
        self.issue_number = issue_number
        self.record_ids = record_ids

    def to_dict(self) -> dict[str, Any]:
        """Summarize the error, including the conflicting record ids."""
        return {**super().to_dict(), "issue_number": self.issue_number, "record_ids": self.record_ids}


class MalformedRecordError(SyncError):
    """Describes an Airtable record whose issue number cannot be used as a join key.

    These are collected during reconciliation rather than raised.
    """

    def __init__(self, record_id: str, reason: str) -> None:
        """Initializes the error with the offending record id and why it was rejected."""
        super().__init__(f"Airtable record {record_id} is malformed: {reason}")
        self.record_id = record_id
        self.reason = reason


class DestinationWriteError(SyncError):
    """Raised when one or more record chunks failed to be written to Airtable."""

    def __init__(self, operation: str, result: "BatchWriteResult") -> None:
        """Initializes the exception with the partial result of the failed batch operation."""
        failed = ", ".join(str(chunk.index) for chunk in result.failed_chunks)
        super().__init__(
            f"Failed to {operation} {result.failed_record_count} of {result.submitted_count} Airtable records "
            f"(failed chunk indices: {failed}; records written: {result.written_count})"
        )
        self.operation = operation
        self.result = result

    def to_dict(self) -> dict[str, Any]:
        """Summarize the error, including per-chunk failure detail."""
        return {
            **super().to_dict(),
            "operation": self.operation,
            "written_count": self.result.written_count,
            "failed_chunks": [{"index": chunk.index, "size": chunk.submitted_count, "error": str(chunk.error)} for chunk in self.result.failed_chunks],
        }


class SyncTimeoutError(SyncError):
    """Raised when a synchronization run exceeds its deadline."""

    pass


class ChunkCancelledError(SyncError):
    """Marks a chunk whose request was cancelled before Airtable answered.

    Airtable may or may not have applied it; the next run reconciles either way.
    """

    pass
