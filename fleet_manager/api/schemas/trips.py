"""Trip request schemas."""
from __future__ import annotations

import datetime as dt
from typing import Literal, Optional

from pydantic import Field, field_validator, model_validator

from .base import RecordPayload

TripStatus = Literal["planned", "in_progress", "completed", "cancelled"]

# Minute-resolution local time as sent by <input type="datetime-local">.
TRIP_TIME_FORMAT = "%Y-%m-%dT%H:%M"


class TripPayload(RecordPayload):
    """Body for POST /api/trips and PUT /api/trips/{id}."""

    vehicle_id: int
    driver_id: int
    start_location: str = Field(min_length=1, max_length=255)
    end_location: str = Field(min_length=1, max_length=255)
    start_time: str
    end_time: Optional[str] = None
    start_mileage: float = Field(ge=0)
    end_mileage: Optional[float] = Field(default=None, ge=0)
    distance: Optional[float] = Field(default=None, ge=0)
    trip_date: dt.date
    status: TripStatus = "planned"

    @field_validator("start_time", "end_time")
    @classmethod
    def _minute_timestamp(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        try:
            dt.datetime.strptime(value, TRIP_TIME_FORMAT)
        except ValueError as exc:
            raise ValueError("must match the format YYYY-MM-DDTHH:MM") from exc
        return value

    @model_validator(mode="after")
    def _derive_distance(self) -> "TripPayload":
        if self.end_mileage is not None and self.end_mileage < self.start_mileage:
            raise ValueError("end_mileage must be greater than or equal to start_mileage")
        if self.distance is None and self.end_mileage is not None:
            self.distance = round(self.end_mileage - self.start_mileage, 2)
        return self
