"""Vehicle location request schemas."""
from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import Field

from .base import RecordPayload


class LocationPayload(RecordPayload):
    """Body for POST /api/vehicle-locations (a phone or tracker ping)."""

    vehicle_id: Optional[int] = None
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    accuracy: Optional[float] = Field(default=None, ge=0)
    speed: Optional[float] = Field(default=None, ge=0)
    location_description: Optional[str] = Field(default=None, max_length=255)
    recorded_at: Optional[dt.datetime] = None
