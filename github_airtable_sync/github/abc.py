"""Base ABC for GitHub clients."""

from abc import ABC, abstractmethod
from typing import Any, Literal


class GitHubClientBase(ABC):
    """Base ABC for GitHub clients."""

    # Issues
    @abstractmethod
    async def list_issues(self, state: Literal["open", "closed", "all"] = "all", **kwargs: Any) -> list[Any]:
        """List issues (excluding pull requests) for a repository."""
        pass
