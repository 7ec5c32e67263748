"""Reconcile and validate configuration before any synchronization work starts."""

from pathlib import Path

from github_airtable_sync.configuration.exceptions import (
    ConfigurationError,
    ConfigurationErrors,
    GitHubAuthenticationConfigurationUndefinedError,
    InvalidIssueStateError,
    RequiredConfigurationElementError,
)
from github_airtable_sync.configuration.models import AirtableConfig, GitHubAuthenticationType, IssueState, SyncConfig
from github_airtable_sync.utils.constants import (
    DEFAULT_AIRTABLE_API_URL,
    DEFAULT_GITHUB_API_URL,
    DEFAULT_SYNC_TIMEOUT,
    VALID_ISSUE_STATES,
)
from github_airtable_sync.utils.github import split_repository_in_configuration


async def validate_github_authentication_configuration(
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
) -> GitHubAuthenticationType:
    """Validates the GitHub authentication configuration.

    Args:
        github_pat_token (str | None): The GitHub PAT token.
        github_app_id (int | None): The GitHub App ID.
        github_app_private_key_path (Path | None): The path to the GitHub App private key.
        github_app_installation_id (int | None): The GitHub App installation ID.

    Raises:
        GitHubAuthenticationConfigurationUndefinedError: If both or neither of PAT and App configurations are defined.

    Returns:
        GitHubAuthenticationType: The type of GitHub authentication used.
    """
    if github_pat_token and (github_app_id or github_app_private_key_path or github_app_installation_id):
        raise GitHubAuthenticationConfigurationUndefinedError("Both PAT and GitHub App configurations are defined. Please use one or the other.")

    if github_pat_token:
        return GitHubAuthenticationType.PAT

    if github_app_id and github_app_private_key_path and github_app_installation_id:
        return GitHubAuthenticationType.APP
    elif github_app_id or github_app_private_key_path or github_app_installation_id:
        missing_settings: list[dict[str, str]] = []
        if not github_app_id:
            missing_settings.append({"name": "GitHub App ID", "cli_name": "--github-app-id", "env_name": "GITHUB_APP_ID"})
        if not github_app_private_key_path:
            missing_settings.append(
                {"name": "GitHub App private key path", "cli_name": "--github-app-private-key-path", "env_name": "GITHUB_APP_PRIVATE_KEY_PATH"}
            )
        if not github_app_installation_id:
            missing_settings.append(
                {"name": "GitHub App installation ID", "cli_name": "--github-app-installation-id", "env_name": "GITHUB_APP_INSTALLATION_ID"}
            )
        msg = "Incomplete GitHub App configuration - missing settings include " + ", ".join(
            f"{setting['name']} (command line option {setting['cli_name']}, environment variable {setting['env_name']})"
            for setting in missing_settings
        )
        raise GitHubAuthenticationConfigurationUndefinedError(msg)
    else:
        raise GitHubAuthenticationConfigurationUndefinedError(
            "No GitHub authentication configuration provided. Please provide either a PAT or a GitHub App configuration."
        )


async def validate_issue_state(state: str | None) -> IssueState:
    """Validates the issue state filter, accepting open, closed, or all in any letter case."""
    normalized_state = (state or "").strip().lower()
    if normalized_state not in VALID_ISSUE_STATES:
        raise InvalidIssueStateError(f"Issue state must be one of {' | '.join(VALID_ISSUE_STATES)}, got '{state}'")
    return IssueState(normalized_state)


async def validate_airtable_configuration(
    airtable_api_key: str | None,
    airtable_base: str | None,
    airtable_table: str | None,
) -> list[RequiredConfigurationElementError]:
    """Returns one error for every required Airtable setting that is missing."""
    missing: list[RequiredConfigurationElementError] = []
    if not airtable_api_key:
        missing.append(RequiredConfigurationElementError("Airtable API key", "airtable-api-key", "AIRTABLE_API_KEY"))
    if not airtable_base:
        missing.append(RequiredConfigurationElementError("Airtable base", "airtable-base", "AIRTABLE_BASE"))
    if not airtable_table:
        missing.append(RequiredConfigurationElementError("Airtable table", "airtable-table", "AIRTABLE_TABLE"))
    return missing


async def reconcile_sync_configuration(
    repo: str | None,
    state: str | None,
    github_pat_token: str | None = None,
    github_app_id: int | None = None,
    github_app_private_key_path: Path | None = None,
    github_app_installation_id: int | None = None,
    github_api_url: str = DEFAULT_GITHUB_API_URL,
    airtable_api_key: str | None = None,
    airtable_base: str | None = None,
    airtable_table: str | None = None,
    airtable_api_url: str = DEFAULT_AIRTABLE_API_URL,
    timeout_seconds: float = DEFAULT_SYNC_TIMEOUT,
    debug: bool = False,
) -> SyncConfig:
    """Validates every setting of a sync run and builds the immutable SyncConfig.

    All problems are collected so that they can be reported together.

    Raises:
        ConfigurationErrors: If any setting is missing or invalid.
    """
    errors: list[ConfigurationError] = []

    if not repo:
        errors.append(RequiredConfigurationElementError("GitHub repository", "repo", "REPO"))
    else:
        try:
            await split_repository_in_configuration(repo)
        except ConfigurationError as exc:
            errors.append(exc)

    github_auth_type: GitHubAuthenticationType | None = None
    try:
        github_auth_type = await validate_github_authentication_configuration(
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
        )
    except GitHubAuthenticationConfigurationUndefinedError as exc:
        errors.append(exc)

    errors.extend(await validate_airtable_configuration(airtable_api_key, airtable_base, airtable_table))

    issue_state: IssueState | None = None
    try:
        issue_state = await validate_issue_state(state)
    except InvalidIssueStateError as exc:
        errors.append(exc)

    if timeout_seconds <= 0:
        errors.append(ConfigurationError(f"Timeout must be a positive number of seconds, got {timeout_seconds}"))

    if errors or not (repo and issue_state and github_auth_type and airtable_api_key and airtable_base and airtable_table):
        raise ConfigurationErrors(errors)

    return SyncConfig(
        repo=repo.strip("/"),
        state=issue_state,
        github_authentication_type=github_auth_type,
        airtable=AirtableConfig(api_key=airtable_api_key, base_id=airtable_base, table=airtable_table, api_url=airtable_api_url),
        github_pat_token=github_pat_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
        github_api_url=github_api_url,
        timeout_seconds=timeout_seconds,
        debug=debug,
    )
