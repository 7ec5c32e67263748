"""Orchestrates the synchronization of GitHub issues into Airtable."""

import asyncio
import time

import structlog
from githubkit.versions.latest.models import Issue

from github_airtable_sync.airtable.abc import AirtableClientBase
from github_airtable_sync.airtable.adapter import AirtableAdapter
from github_airtable_sync.airtable.models import AirtableRecord
from github_airtable_sync.configuration.models import SyncConfig
from github_airtable_sync.github.abc import GitHubClientBase
from github_airtable_sync.github.adapter import GitHubKitAdapter
from github_airtable_sync.synchronize.exceptions import (
    DestinationFetchError,
    DestinationWriteError,
    SourceFetchError,
    SyncError,
    SyncTimeoutError,
)
from github_airtable_sync.synchronize.progress import NullProgressReporter, ProgressReporter
from github_airtable_sync.synchronize.reconcile import reconcile_issues
from github_airtable_sync.synchronize.results import SyncResult
from github_airtable_sync.synchronize.writer import BatchWriter

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def fetch_github_issues(config: SyncConfig, github_adapter: GitHubClientBase | None = None) -> list[Issue]:
    """Fetch every issue in the configured state, excluding pull requests.

    Raises:
        SourceFetchError: If the client cannot be created or any page fails to load.
    """
    try:
        if github_adapter is None:
            github_adapter = await GitHubKitAdapter.create(
                repo=config.repo,
                github_auth_type=config.github_authentication_type,
                github_pat_token=config.github_pat_token,
                github_app_id=config.github_app_id,
                github_app_private_key_path=config.github_app_private_key_path,
                github_app_installation_id=config.github_app_installation_id,
                github_api_url=config.github_api_url,
            )
        return await github_adapter.list_issues(state=config.state.value)
    except Exception as e:
        logger.error("Failed to fetch issues from GitHub", repo=config.repo, error=str(e), error_type=type(e).__name__)
        raise SourceFetchError(f"Failed to fetch issues from {config.repo}: {e}") from e


async def fetch_airtable_records(config: SyncConfig, airtable_adapter: AirtableClientBase) -> list[AirtableRecord]:
    """Fetch every record of the configured Airtable table.

    Raises:
        DestinationFetchError: If any page fails to load.
    """
    try:
        return await airtable_adapter.list_records()
    except Exception as e:
        logger.error("Failed to fetch records from Airtable", table=config.airtable.table, error=str(e), error_type=type(e).__name__)
        raise DestinationFetchError(f"Failed to fetch records from Airtable table {config.airtable.table}: {e}") from e


async def _sync(
    config: SyncConfig,
    result: SyncResult,
    progress: ProgressReporter,
    github_adapter: GitHubClientBase | None,
    airtable_adapter: AirtableClientBase,
) -> None:
    """Fetch, reconcile, and write, recording progress on result as each stage completes."""
    progress.start(f"Retrieving issues from {config.repo} and records from Airtable table {config.airtable.table}")
    start_time = time.time()
    issues, records = await asyncio.gather(
        fetch_github_issues(config, github_adapter),
        fetch_airtable_records(config, airtable_adapter),
        return_exceptions=True,
    )
    if isinstance(issues, BaseException):
        raise issues
    if isinstance(records, BaseException):
        raise records
    result.issues_fetched = len(issues)
    result.records_fetched = len(records)
    logger.info(
        "Fetched issues and records",
        issue_count=len(issues),
        record_count=len(records),
        duration=round(time.time() - start_time, 2),
    )
    progress.succeed(f"Retrieved {len(issues)} issues from GitHub and {len(records)} records from Airtable")

    reconciliation = await reconcile_issues(issues, records)
    result.unchanged_count = len(reconciliation.unchanged)
    result.malformed_record_count = len(reconciliation.malformed_records)
    for malformed in reconciliation.malformed_records:
        progress.fail(str(malformed))

    # Chunks land on result as they finish so a timeout keeps what was written.
    writer = BatchWriter(airtable_adapter, progress=progress)
    await asyncio.gather(
        writer.insert_issues(reconciliation.to_insert, result=result.inserted),
        writer.update_issues(reconciliation.to_update, result=result.updated),
    )


async def run_sync_workflow(
    config: SyncConfig,
    progress: ProgressReporter | None = None,
    github_adapter: GitHubClientBase | None = None,
    airtable_adapter: AirtableClientBase | None = None,
) -> SyncResult:
    """Run the sync workflow: copy new and changed GitHub issues into Airtable.

    Adapters are created from config unless supplied. Errors are reported on the
    returned SyncResult rather than raised, and partial write counts are kept.
    """
    progress = progress or NullProgressReporter()
    result = SyncResult()
    owns_airtable_adapter = airtable_adapter is None
    if airtable_adapter is None:
        airtable_adapter = AirtableAdapter.create(config.airtable)

    start_time = time.time()
    logger.info("Starting sync", repo=config.repo, state=config.state.value, table=config.airtable.table, timeout=config.timeout_seconds)
    try:
        async with asyncio.timeout(config.timeout_seconds):
            await _sync(config, result, progress, github_adapter, airtable_adapter)
    except TimeoutError:
        error = SyncTimeoutError(f"Synchronization did not finish within {config.timeout_seconds} seconds")
        logger.error("Sync timed out", timeout=config.timeout_seconds)
        progress.fail(str(error))
        result.errors.append(error.to_dict())
    except SyncError as exc:
        logger.error("Sync failed", error=str(exc), error_type=type(exc).__name__)
        progress.fail(str(exc))
        result.errors.append(exc.to_dict())
    finally:
        if owns_airtable_adapter and isinstance(airtable_adapter, AirtableAdapter):
            await airtable_adapter.close()

    for operation, batch_result in (("create", result.inserted), ("update", result.updated)):
        try:
            batch_result.raise_for_failures(operation)
        except DestinationWriteError as exc:
            logger.error("Airtable writes incomplete", operation=operation, written_count=batch_result.written_count)
            result.errors.append(exc.to_dict())

    logger.info(
        "Finished sync",
        issues_fetched=result.issues_fetched,
        records_fetched=result.records_fetched,
        inserted=result.inserted_count,
        updated=result.updated_count,
        unchanged=result.unchanged_count,
        error_count=len(result.errors),
        duration=round(time.time() - start_time, 2),
    )
    return result
