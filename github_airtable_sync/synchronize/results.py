"""Contains results of application execution."""

from dataclasses import dataclass, field
from typing import Any

from github_airtable_sync.synchronize.exceptions import DestinationWriteError


@dataclass
class ChunkResult:
    """Outcome of one create or update call carrying a single chunk of records."""

    index: int
    submitted_count: int
    written_count: int = 0
    error: BaseException | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class BatchWriteResult:
    """Aggregate outcome of writing every chunk of a batch operation."""

    chunks: list[ChunkResult] = field(default_factory=list)

    def add(self, chunk: ChunkResult) -> None:
        """Record the outcome of a finished chunk, keeping chunks ordered by index."""
        self.chunks.append(chunk)
        self.chunks.sort(key=lambda c: c.index)

    @property
    def written_count(self) -> int:
        return sum(chunk.written_count for chunk in self.chunks)

    @property
    def submitted_count(self) -> int:
        return sum(chunk.submitted_count for chunk in self.chunks)

    @property
    def failed_chunks(self) -> list[ChunkResult]:
        return [chunk for chunk in self.chunks if not chunk.succeeded]

    @property
    def failed_record_count(self) -> int:
        return sum(chunk.submitted_count for chunk in self.failed_chunks)

    @property
    def succeeded(self) -> bool:
        return not self.failed_chunks

    def raise_for_failures(self, operation: str) -> None:
        """Raise DestinationWriteError if any chunk failed."""
        if not self.succeeded:
            raise DestinationWriteError(operation, self)


class SyncResult:
    """Contains results of the sync workflow."""

    def __init__(
        self,
        issues_fetched: int = 0,
        records_fetched: int = 0,
        unchanged_count: int = 0,
        malformed_record_count: int = 0,
        inserted: BatchWriteResult | None = None,
        updated: BatchWriteResult | None = None,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        """Initialize the result with fetch counts, write results, and errors."""
        self.issues_fetched = issues_fetched
        self.records_fetched = records_fetched
        self.unchanged_count = unchanged_count
        self.malformed_record_count = malformed_record_count
        self.inserted = inserted or BatchWriteResult()
        self.updated = updated or BatchWriteResult()
        self.errors = errors or []

    @property
    def inserted_count(self) -> int:
        return self.inserted.written_count

    @property
    def updated_count(self) -> int:
        return self.updated.written_count
