"""Vehicle request schemas."""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field

from .base import RecordPayload

VehicleStatus = Literal["active", "maintenance", "inactive"]
VehicleType = Literal["Car", "Bus", "Truck", "Van"]
FuelType = Literal["diesel", "gasoline", "petrol", "electric", "hybrid"]


class VehiclePayload(RecordPayload):
    """Body for POST /api/vehicles and PUT /api/vehicles/{id}."""

    name: Optional[str] = Field(default=None, max_length=255)
    make: str = Field(min_length=1, max_length=255)
    model: str = Field(min_length=1, max_length=255)
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    license_plate: str = Field(min_length=1, max_length=50)
    vin: Optional[str] = Field(default=None, max_length=50)
    type: Optional[VehicleType] = None
    fuel_type: Optional[FuelType] = None
    fuel_capacity: Optional[float] = Field(default=None, ge=0)
    mileage: Optional[float] = Field(default=None, ge=0)
    status: VehicleStatus = "active"
    notes: Optional[str] = None
    driver_id: Optional[int] = None
