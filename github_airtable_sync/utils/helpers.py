"""General utility functions and helper classes."""

from typing import Sequence, TypeVar

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> list[list[T]]:
    """Split items into consecutive chunks of at most size elements."""
    if size < 1:
        raise ValueError(f"Chunk size must be a positive integer, got {size}")
    return [list(items[start : start + size]) for start in range(0, len(items), size)]


def format_assignee_handle(login: str) -> str:
    """Format a GitHub login as an @-mention handle (e.g. '@octocat')."""
    return f"@{login}"
