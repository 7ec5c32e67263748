"""Writes projected issues to Airtable in concurrently dispatched chunks."""

import asyncio
import time
from typing import Any, Awaitable, Callable, Sequence, TypeVar

import structlog
from githubkit.versions.latest.models import Issue

from github_airtable_sync.airtable.abc import AirtableClientBase
from github_airtable_sync.synchronize.exceptions import ChunkCancelledError
from github_airtable_sync.synchronize.models import OPTIONAL_FIELDS, IssueUpdate
from github_airtable_sync.synchronize.progress import NullProgressReporter, ProgressReporter
from github_airtable_sync.synchronize.projection import project_issue
from github_airtable_sync.synchronize.results import BatchWriteResult, ChunkResult
from github_airtable_sync.synchronize.types import ProjectedFields
from github_airtable_sync.utils.constants import AIRTABLE_MAX_RECORDS_PER_REQUEST
from github_airtable_sync.utils.helpers import chunked

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

T = TypeVar("T")


def fields_for_update(issue: Issue) -> ProjectedFields:
    """Project an issue for a PATCH, explicitly clearing optional fields the issue no longer has."""
    fields = project_issue(issue)
    for field in OPTIONAL_FIELDS:
        fields.setdefault(field, None)
    return fields


class BatchWriter:
    """Creates and updates Airtable records in chunks no larger than the API allows."""

    def __init__(
        self,
        airtable: AirtableClientBase,
        progress: ProgressReporter | None = None,
        max_records_per_request: int = AIRTABLE_MAX_RECORDS_PER_REQUEST,
    ) -> None:
        """Initialize the writer with the Airtable client to write through."""
        self.airtable = airtable
        self.progress = progress or NullProgressReporter()
        self.max_records_per_request = max_records_per_request

    async def _write_chunks(
        self,
        operation: str,
        records: Sequence[T],
        write_chunk: Callable[[list[T]], Awaitable[list[Any]]],
        result: BatchWriteResult,
    ) -> BatchWriteResult:
        """Submit every chunk at once, adding each chunk's outcome to result as soon as it is known.

        Chunks still in flight when the batch is cancelled are added as failed before
        the cancellation propagates, so result always reflects what was written.
        """
        chunks = chunked(records, self.max_records_per_request)
        if not chunks:
            return result

        async def _run_chunk(index: int, chunk: list[T]) -> None:
            try:
                written = await write_chunk(chunk)
            except asyncio.CancelledError:
                logger.warning(f"Airtable {operation} request cancelled", chunk_index=index, chunk_size=len(chunk))
                result.add(
                    ChunkResult(
                        index=index,
                        submitted_count=len(chunk),
                        error=ChunkCancelledError(f"Airtable {operation} request for chunk {index} was cancelled before it completed"),
                    )
                )
                raise
            except Exception as e:
                logger.error(
                    f"Airtable {operation} request failed",
                    chunk_index=index,
                    chunk_size=len(chunk),
                    error=str(e),
                    error_type=type(e).__name__,
                )
                result.add(ChunkResult(index=index, submitted_count=len(chunk), error=e))
            else:
                result.add(ChunkResult(index=index, submitted_count=len(chunk), written_count=len(written)))

        start_time = time.time()
        logger.info(f"Submitting Airtable {operation} requests", record_count=len(records), chunk_count=len(chunks))
        await asyncio.gather(*(_run_chunk(index, chunk) for index, chunk in enumerate(chunks)))

        logger.info(
            f"Finished Airtable {operation} requests",
            written_count=result.written_count,
            failed_chunk_count=len(result.failed_chunks),
            duration=round(time.time() - start_time, 2),
        )
        return result

    async def insert_issues(self, issues: Sequence[Issue], result: BatchWriteResult | None = None) -> BatchWriteResult:
        """Create one Airtable record per issue, recording chunk outcomes on result if given."""
        self.progress.start(f"Creating {len(issues)} records in Airtable")

        async def _create(chunk: list[Issue]) -> list[Any]:
            return await self.airtable.create_records([project_issue(issue) for issue in chunk], typecast=True)

        result = await self._write_chunks("create", issues, _create, result if result is not None else BatchWriteResult())
        self._report(result, "Created")
        return result

    async def update_issues(self, updates: Sequence[IssueUpdate], result: BatchWriteResult | None = None) -> BatchWriteResult:
        """Overwrite the matched Airtable record of each issue with its current fields."""
        self.progress.start(f"Updating {len(updates)} records in Airtable")

        async def _update(chunk: list[IssueUpdate]) -> list[Any]:
            return await self.airtable.update_records([(update.record_id, fields_for_update(update.issue)) for update in chunk], typecast=True)

        result = await self._write_chunks("update", updates, _update, result if result is not None else BatchWriteResult())
        self._report(result, "Updated")
        return result

    def _report(self, result: BatchWriteResult, verb: str) -> None:
        if result.succeeded:
            self.progress.succeed(f"{verb} {result.written_count} records in Airtable")
        else:
            self.progress.fail(
                f"{verb} {result.written_count} records in Airtable; {len(result.failed_chunks)} of {len(result.chunks)} requests failed"
            )
