"""Base ABC for Airtable clients."""

from abc import ABC, abstractmethod
from typing import Any


class AirtableClientBase(ABC):
    """Base ABC for Airtable clients."""

    @abstractmethod
    async def list_records(self, **kwargs: Any) -> list[Any]:
        """List every record in the table."""
        pass

    @abstractmethod
    async def create_records(self, records: list[dict[str, Any]], typecast: bool = True) -> list[Any]:
        """Create up to 10 records in the table from their field mappings."""
        pass

    @abstractmethod
    async def update_records(self, records: list[tuple[str, dict[str, Any]]], typecast: bool = True) -> list[Any]:
        """Update up to 10 records, each given as a (record id, fields) pair."""
        pass
