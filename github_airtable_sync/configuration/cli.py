"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from github_airtable_sync.configuration.exceptions import ConfigurationError, ConfigurationErrors, RequiredConfigurationElementError
from github_airtable_sync.configuration.reconcile import reconcile_sync_configuration
from github_airtable_sync.synchronize.driver import run_sync_workflow
from github_airtable_sync.synchronize.progress import ConsoleProgressReporter
from github_airtable_sync.synchronize.results import SyncResult
from github_airtable_sync.utils.constants import DEFAULT_AIRTABLE_API_URL, DEFAULT_GITHUB_API_URL, DEFAULT_SYNC_TIMEOUT
from github_airtable_sync.utils.logging_config import configure_logging

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False)


@typer_app.callback()
def typer_app_callback() -> None:
    """Synchronize GitHub issues into an Airtable table."""


def _usage_message(error: ConfigurationError) -> str:
    if isinstance(error, RequiredConfigurationElementError):
        return f"Usage: --{error.cli_name} arg is required (or set {error.env_name})"
    return f"Usage: {error}"


def _echo_summary(result: SyncResult) -> None:
    typer.echo("")
    typer.echo(f"Issues fetched from GitHub: {result.issues_fetched}")
    typer.echo(f"Records fetched from Airtable: {result.records_fetched}")
    typer.echo(f"Records created: {result.inserted_count}")
    typer.echo(f"Records updated: {result.updated_count}")
    typer.echo(f"Records unchanged: {result.unchanged_count}")
    if result.malformed_record_count:
        typer.echo(f"Malformed records skipped: {result.malformed_record_count}")


@typer_app.command(name="sync")
def sync_cli(
    repo: Annotated[str | None, Argument(envvar="REPO", help="GitHub repository (owner/repo).")] = None,
    state: Annotated[str, Option(envvar="STATE", help="Issue state to sync: open | closed | all.")] = "open",
    github_api_url: Annotated[str, Option(envvar="GITHUB_API_URL", help="GitHub API URL.")] = DEFAULT_GITHUB_API_URL,
    github_pat_token: Annotated[str | None, Option(envvar="GITHUB_PAT_TOKEN", help="GitHub Personal Access Token.")] = None,
    github_app_id: Annotated[int | None, Option(envvar="GITHUB_APP_ID", help="GitHub App ID.")] = None,
    github_app_private_key_path: Annotated[Path | None, Option(envvar="GITHUB_APP_PRIVATE_KEY_PATH", help="Path to GitHub App private key.")] = None,
    github_app_installation_id: Annotated[int | None, Option(envvar="GITHUB_APP_INSTALLATION_ID", help="GitHub App Installation ID.")] = None,
    airtable_api_key: Annotated[str | None, Option(envvar="AIRTABLE_API_KEY", help="Airtable API key or personal access token.")] = None,
    airtable_base: Annotated[str | None, Option(envvar="AIRTABLE_BASE", help="Airtable base ID.")] = None,
    airtable_table: Annotated[str | None, Option(envvar="AIRTABLE_TABLE", help="Airtable table name or ID.")] = None,
    airtable_api_url: Annotated[str, Option(envvar="AIRTABLE_API_URL", help="Airtable API URL.")] = DEFAULT_AIRTABLE_API_URL,
    timeout: Annotated[float, Option(envvar="SYNC_TIMEOUT", help="Deadline in seconds for the whole sync.")] = DEFAULT_SYNC_TIMEOUT,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug mode.")] = False,
) -> None:
    """Create Airtable records for new GitHub issues and update records whose issues changed."""
    configure_logging(debug=debug)

    try:
        config = asyncio.run(
            reconcile_sync_configuration(
                repo=repo,
                state=state,
                github_pat_token=github_pat_token,
                github_app_id=github_app_id,
                github_app_private_key_path=github_app_private_key_path,
                github_app_installation_id=github_app_installation_id,
                github_api_url=github_api_url,
                airtable_api_key=airtable_api_key,
                airtable_base=airtable_base,
                airtable_table=airtable_table,
                airtable_api_url=airtable_api_url,
                timeout_seconds=timeout,
                debug=debug,
            )
        )
    except ConfigurationErrors as e:
        for error in e.errors:
            typer.secho(_usage_message(error), fg=typer.colors.RED, err=True)
        typer.echo("", err=True)
        raise typer.Exit(1) from e

    result = asyncio.run(run_sync_workflow(config, progress=ConsoleProgressReporter()))
    _echo_summary(result)
    if result.errors:
        typer.echo("Error(s) encountered while syncing:", err=True)
        for err in result.errors:
            typer.secho(f"{err['error_type']}: {err['message']}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


def main() -> None:
    """Entry point for the github-airtable-sync console script."""
    typer_app()


if __name__ == "__main__":
    main()
