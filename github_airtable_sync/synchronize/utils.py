"""Contains utility functions for synchronization decisions."""

from typing import Any, Sequence

from github_airtable_sync.synchronize.models import SyncDecision
from github_airtable_sync.synchronize.types import HasName, LabelType
from github_airtable_sync.utils.constants import LABEL_SEPARATOR


async def value_is_noney(value: Any) -> bool:
    """Check if a value is None, an empty list, an empty string, or an empty dict."""
    if value is None:
        return True
    elif isinstance(value, list) and value == []:
        return True
    elif isinstance(value, str) and value == "":
        return True
    elif isinstance(value, dict) and not value:
        return True
    return False


async def compare_airtable_field(projected_value: Any, airtable_value: Any) -> SyncDecision:
    """Compare a projected issue field with the value stored in Airtable.

    Missing and empty values on either side are treated as the same absent value.
    """
    projected_value_is_noney = await value_is_noney(projected_value)
    airtable_value_is_noney = await value_is_noney(airtable_value)
    if projected_value_is_noney and airtable_value_is_noney:
        return SyncDecision.NOOP
    elif projected_value_is_noney or airtable_value_is_noney:
        return SyncDecision.UPDATE
    elif projected_value == airtable_value:
        return SyncDecision.NOOP
    else:
        return SyncDecision.UPDATE


def label_name(label: LabelType) -> str | None:
    """Return the name of a label given as a string, a dict, or a GitHub label object."""
    if isinstance(label, str):
        return label
    elif isinstance(label, dict):
        name = label.get("name")
        return name if isinstance(name, str) else None
    elif isinstance(label, HasName):
        return label.name
    return None


def ordered_label_names(labels: Sequence[LabelType] | None) -> list[str]:
    """Extract label names in their original order, skipping labels without a name."""
    names: list[str] = []
    for label in labels or []:
        name = label_name(label)
        if name is not None:
            names.append(name)
    return names


def extract_label_names(labels: Sequence[LabelType]) -> set[str]:
    """Extract the non-empty label names from a list of strings, dicts, or label objects."""
    return {name for name in ordered_label_names(labels) if name}


def split_label_string(value: str | None) -> list[str]:
    """Split a comma-joined label string, discarding empty pieces."""
    if not value:
        return []
    return [token for token in value.split(LABEL_SEPARATOR) if token]


async def compare_label_sets(projected_labels: str | None, airtable_labels: Any) -> SyncDecision:
    """Compare projected comma-joined labels with the labels stored in Airtable.

    When Airtable stores labels as a multiple select (a list), the comparison is
    order-independent. Any other stored shape falls back to compare_airtable_field.
    """
    if not isinstance(airtable_labels, list):
        return await compare_airtable_field(projected_labels, airtable_labels)

    airtable_set = extract_label_names(airtable_labels)
    projected_tokens = split_label_string(projected_labels)
    if airtable_set and not projected_tokens:
        return SyncDecision.UPDATE
    if len(airtable_set) != len(set(projected_tokens)):
        return SyncDecision.UPDATE
    for token in projected_tokens:
        if token not in airtable_set:
            return SyncDecision.UPDATE
    return SyncDecision.NOOP
