"""Pydantic models for Airtable API payloads."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AirtableRecord(BaseModel):
    """A single row of an Airtable table."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    fields: dict[str, Any] = Field(default_factory=dict)
    created_time: str | None = Field(default=None, alias="createdTime")


class AirtableRecordPage(BaseModel):
    """One page of a record listing; offset is absent on the last page."""

    records: list[AirtableRecord] = Field(default_factory=list)
    offset: str | None = None
