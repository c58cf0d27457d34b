"""Trip records."""
from __future__ import annotations

from .records import RecordService


class TripService(RecordService):
    """Trips of the caller's company.  Distance is derived by the payload."""

    table = "trips"
    label = "trip"
    filter_fields = ("vehicle_id", "driver_id", "status")
    order_by = "trip_date DESC, id DESC"
