"""Shared base for request bodies that map onto fleet table columns."""
from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, model_validator


class RecordPayload(BaseModel):
    """Request body whose fields are stored as table columns.

    Unknown keys sent by the frontend are ignored.  A blank string is
    read as an absent value, so an empty form input stores NULL.  Dates
    and datetimes are stored as ISO-8601 text.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    @model_validator(mode="before")
    @classmethod
    def _blank_to_none(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {
            key: None if isinstance(value, str) and not value.strip() else value
            for key, value in data.items()
        }

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
