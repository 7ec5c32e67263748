"""Fixtures for unit tests."""

from types import SimpleNamespace
from typing import Any, Callable, Generator

import pytest
import structlog


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def make_issue() -> Callable[..., SimpleNamespace]:
    """Build stand-ins for githubkit Issue objects with sensible defaults."""

    def _make_issue(
        number: int = 1,
        title: str = "Issue title",
        body: str | None = "Issue body",
        labels: list[Any] | None = None,
        assignee: str | None = None,
        state: str = "open",
        created_at: str = "2024-01-01T00:00:00Z",
        updated_at: str = "2024-01-02T00:00:00Z",
        pull_request: Any = None,
    ) -> SimpleNamespace:
        return SimpleNamespace(
            number=number,
            title=title,
            body=body,
            labels=[SimpleNamespace(name=name) if isinstance(name, str) else name for name in (labels or [])],
            assignee=SimpleNamespace(login=assignee) if assignee else None,
            state=state,
            created_at=created_at,
            updated_at=updated_at,
            html_url=f"https://github.com/octocat/Hello-World/issues/{number}",
            pull_request=pull_request,
        )

    return _make_issue
