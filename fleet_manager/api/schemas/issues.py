"""Issue and expense request schemas."""
from __future__ import annotations

import datetime as dt
from typing import Literal, Optional

from pydantic import Field

from .base import RecordPayload

IssuePriority = Literal["low", "medium", "high", "critical"]
IssueStatus = Literal["open", "in_progress", "resolved", "closed"]


class IssuePayload(RecordPayload):
    """Body for POST /api/issues and PUT /api/issues/{id}."""

    vehicle_id: int
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    priority: IssuePriority = "medium"
    status: IssueStatus = "open"
    reported_date: dt.date = Field(default_factory=dt.date.today)


class ExpensePayload(RecordPayload):
    """Body for POST /api/expenses and PUT /api/expenses/{id}."""

    vehicle_id: int
    category: str = Field(min_length=1, max_length=100)
    amount: float = Field(ge=0)
    expense_date: dt.date
    notes: Optional[str] = None
