"""Unit tests for the GitHubKitAdapter class and related GitHub operations."""

from types import SimpleNamespace
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from github_airtable_sync.configuration.models import GitHubAuthenticationType
from github_airtable_sync.github.adapter import GitHubKitAdapter, is_pull_request


class DummyResponse:
    """A dummy response object to mock GitHub API responses."""

    def __init__(self, parsed_data: list[Any]) -> None:
        """Initialize the dummy response with parsed data."""
        self.status_code: int = 200
        self.parsed_data = parsed_data


def test_is_pull_request(make_issue: Callable[..., Any]) -> None:
    """Test that pull requests are recognized by their pull_request attribute."""
    assert is_pull_request(make_issue(pull_request=SimpleNamespace(url="https://api.github.com/pulls/1")))
    assert not is_pull_request(make_issue(pull_request=None))


@pytest.mark.asyncio
async def test_list_issues_filters_pull_requests(make_issue: Callable[..., Any]) -> None:
    """Test that pull requests returned by the issues API are dropped."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    issue = make_issue(number=1)
    pull_request = make_issue(number=2, pull_request=SimpleNamespace(url="https://api.github.com/pulls/2"))
    adapter.client.rest.issues.async_list_for_repo = AsyncMock(return_value=DummyResponse([issue, pull_request]))

    issues = await adapter.list_issues(state="open")

    assert issues == [issue]
    adapter.client.rest.issues.async_list_for_repo.assert_awaited_once_with(owner="owner", repo="repo", state="open", per_page=100, page=1)


@pytest.mark.asyncio
async def test_list_issues_paginates_until_short_page(make_issue: Callable[..., Any]) -> None:
    """Test that pages are requested until one comes back short."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    first_page = [make_issue(number=n) for n in range(1, 3)]
    second_page = [make_issue(number=3)]
    adapter.client.rest.issues.async_list_for_repo = AsyncMock(side_effect=[DummyResponse(first_page), DummyResponse(second_page)])

    issues = await adapter.list_issues(state="all", per_page=2)

    assert [issue.number for issue in issues] == [1, 2, 3]
    assert adapter.client.rest.issues.async_list_for_repo.await_count == 2


@pytest.mark.asyncio
async def test_list_issues_stops_on_empty_page(make_issue: Callable[..., Any]) -> None:
    """Test that an empty page ends pagination."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    full_page = [make_issue(number=n) for n in range(1, 3)]
    adapter.client.rest.issues.async_list_for_repo = AsyncMock(side_effect=[DummyResponse(full_page), DummyResponse([])])

    issues = await adapter.list_issues(state="closed", per_page=2)

    assert len(issues) == 2
    assert adapter.client.rest.issues.async_list_for_repo.await_count == 2


@pytest.mark.asyncio
async def test_list_issues_propagates_errors() -> None:
    """Test that a failing page raises instead of returning a partial list."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.issues.async_list_for_repo = AsyncMock(side_effect=RuntimeError("boom"))

    with pytest.raises(RuntimeError, match="boom"):
        await adapter.list_issues()


@pytest.mark.asyncio
async def test_create_splits_repository_and_builds_client() -> None:
    """Test that create parses owner/repo and builds an authenticated client."""
    fake_client = MagicMock()
    with patch("github_airtable_sync.github.adapter.get_github_client", new=AsyncMock(return_value=fake_client)) as mock_get_client:
        adapter = await GitHubKitAdapter.create(
            repo="octocat/Hello-World",
            github_auth_type=GitHubAuthenticationType.PAT,
            github_pat_token="token",
        )

    assert adapter.owner == "octocat"
    assert adapter.repo_name == "Hello-World"
    assert adapter.client is fake_client
    mock_get_client.assert_awaited_once()
