"""Service and inspection request schemas."""
from __future__ import annotations

import datetime as dt
from typing import Literal, Optional

from pydantic import Field

from .base import RecordPayload

ServiceStatus = Literal["pending", "in_progress", "completed", "cancelled"]
InspectionResult = Literal["pass", "fail", "conditional_pass"]


class ServicePayload(RecordPayload):
    """Body for POST /api/services and PUT /api/services/{id}."""

    vehicle_id: int
    service_type: str = Field(min_length=1, max_length=255)
    service_date: dt.date
    cost: float = Field(ge=0)
    notes: Optional[str] = None
    status: Optional[ServiceStatus] = None


class InspectionPayload(RecordPayload):
    """Body for POST /api/inspections and PUT /api/inspections/{id}."""

    vehicle_id: int
    driver_id: int
    inspection_date: dt.date
    notes: str = Field(min_length=1)
    result: Optional[InspectionResult] = None
    next_due_date: Optional[dt.date] = None
    status: Optional[str] = Field(default=None, max_length=50)
