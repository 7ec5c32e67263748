"""Type hints for the synchronize module."""

from typing import Any, Protocol, TypeAlias, runtime_checkable


@runtime_checkable
class HasName(Protocol):
    """Protocol for GitHub label objects."""

    name: str


@runtime_checkable
class HasLogin(Protocol):
    """Protocol for GitHub user objects such as an issue assignee."""

    login: str


LabelType: TypeAlias = str | dict[str, Any] | HasName

ProjectedFields: TypeAlias = dict[str, Any]
"""Airtable field name to value mapping produced for one issue."""
