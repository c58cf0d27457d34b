"""Fuel fillup request schemas."""
from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

from .base import RecordPayload


class FuelFillupPayload(RecordPayload):
    """Body for POST /api/fuel-fillups and PUT /api/fuel-fillups/{id}.

    ``cost_per_gallon`` and ``mpg`` are derived server-side; the minimum
    gallons is enforced there too so the error reads the same on create
    and update.
    """

    vehicle_id: int
    driver_id: int
    gallons: float = Field(ge=0)
    cost: float = Field(ge=0)
    fillup_date: dt.date
    odometer_reading: float = Field(ge=0)


class RecomputeMpgRequest(BaseModel):
    """Body for POST /api/fuel-fillups/recompute-mpg."""

    vehicle_id: Optional[int] = None


class RecomputeMpgQueued(BaseModel):
    """Returned once a recompute job is queued; follow it at /api/jobs/{job_id}."""

    job_id: str
    job_type: str
    vehicle_id: Optional[int] = None
    status: str = "queued"
