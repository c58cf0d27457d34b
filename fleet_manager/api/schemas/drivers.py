"""Driver request schemas."""
from __future__ import annotations

import datetime as dt
from typing import Any, Dict, Literal, Optional

from pydantic import EmailStr, Field

from .base import RecordPayload

DriverStatus = Literal["active", "suspended"]

# Fields stored on the driver's user row rather than the drivers table.
USER_FIELDS = ("name", "email")


class DriverPayload(RecordPayload):
    """Body for POST /api/drivers and PUT /api/drivers/{id}.

    ``name`` and ``email`` belong to the driver's user account;
    ``vehicle_id`` assigns a vehicle to the driver.
    """

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(min_length=1, max_length=20)
    license_number: str = Field(min_length=1, max_length=255)
    license_expiry: dt.date
    status: DriverStatus = "active"
    vehicle_id: Optional[int] = None
    address: Optional[str] = None

    def driver_columns(self) -> Dict[str, Any]:
        record = self.to_record()
        for key in (*USER_FIELDS, "vehicle_id"):
            record.pop(key)
        return record
