"""GitHub client adapter for the githubkit library."""

from pathlib import Path
from typing import Any, Literal, Self

import structlog
from githubkit import Response
from githubkit.versions.latest.models import Issue

from github_airtable_sync.configuration.models import GitHubAuthenticationType
from github_airtable_sync.utils.constants import DEFAULT_GITHUB_API_URL, GITHUB_ISSUES_PER_PAGE
from github_airtable_sync.utils.github import split_repository_in_configuration
from github_airtable_sync.utils.retry import retry_on_rate_limit

from .abc import GitHubClientBase
from .client import GitHubClient, get_github_client

logger = structlog.get_logger(__name__)


def is_pull_request(issue: Any) -> bool:
    """The issues API lists pull requests too; they carry a pull_request attribute."""
    return getattr(issue, "pull_request", None) is not None


class GitHubKitAdapter(GitHubClientBase):
    """GitHub client adapter for the githubkit library."""

    def __init__(self, client: GitHubClient, owner: str, repo_name: str) -> None:
        """Initialize the GitHub client adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name

    @classmethod
    async def create(
        cls,
        repo: str,
        github_auth_type: GitHubAuthenticationType,
        github_pat_token: str | None = None,
        github_app_id: int | None = None,
        github_app_private_key_path: Path | None = None,
        github_app_installation_id: int | None = None,
        github_api_url: str = DEFAULT_GITHUB_API_URL,
    ) -> Self:
        """Create a new GitHub client adapter.

        Args:
            repo: Repository in 'owner/repo' format
            github_auth_type: Type of authentication (PAT or APP)
            github_pat_token: Personal access token (required for PAT auth)
            github_app_id: GitHub App ID (required for APP auth)
            github_app_private_key_path: Path to private key file (required for APP auth)
            github_app_installation_id: Installation ID (required for APP auth)
            github_api_url: GitHub API URL (defaults to https://api.github.com)

        Returns:
            Configured GitHubKitAdapter instance
        """
        owner, repo_name = await split_repository_in_configuration(repo=repo)
        logger.info(
            "Creating client for GitHub instance and repository",
            github_api_url=github_api_url,
            owner=owner,
            repo_name=repo_name,
        )
        client = await get_github_client(
            github_auth_type=github_auth_type,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
            github_api_url=github_api_url,
        )
        return cls(client, owner, repo_name)

    async def list_issues(
        self, state: Literal["open", "closed", "all"] = "all", per_page: int = GITHUB_ISSUES_PER_PAGE, **kwargs: Any
    ) -> list[Issue]:
        """List all issues for a repository, handling pagination and dropping pull requests."""

        @retry_on_rate_limit()
        async def _fetch_page(page: int) -> list[Issue]:
            response: Response[list[Issue]] = await self.client.rest.issues.async_list_for_repo(
                owner=self.owner,
                repo=self.repo_name,
                state=state,
                per_page=per_page,
                page=page,
                **kwargs,
            )
            return response.parsed_data

        all_issues: list[Issue] = []
        pull_request_count = 0
        page: int = 1
        while True:
            logger.debug("Fetching issues page", page=page, state=state)
            issues: list[Issue] = await _fetch_page(page)
            if not issues:
                break
            for issue in issues:
                if is_pull_request(issue):
                    pull_request_count += 1
                else:
                    all_issues.append(issue)
            if len(issues) < per_page:
                break
            page += 1

        logger.info(
            "Fetched all issues for repository",
            owner=self.owner,
            repo_name=self.repo_name,
            state=state,
            issue_count=len(all_issues),
            skipped_pull_requests=pull_request_count,
        )
        return all_issues
