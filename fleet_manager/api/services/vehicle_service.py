"""Vehicle records and per-vehicle fuel economy."""
from __future__ import annotations

from typing import Any, Dict

from ..deps.auth import CurrentUser
from .records import RecordService

LATEST_FILLUPS = 5


class VehicleService(RecordService):
    """Vehicles of the caller's company."""

    table = "vehicles"
    label = "vehicle"
    filter_fields = ("status",)
    reference_fields = ("driver_id",)

    async def show(self, user: CurrentUser, record_id: int) -> Dict[str, Any]:
        vehicle = await super().show(user, record_id)
        vehicle["fuel_fillups"] = await self.store.fetch_all(
            "SELECT * FROM fuel_fillups WHERE vehicle_id = ? AND deleted_at IS NULL "
            "ORDER BY fillup_date DESC, id DESC LIMIT ?",
            (record_id, LATEST_FILLUPS),
        )
        return vehicle

    async def fuel_economy(self, user: CurrentUser, record_id: int) -> Dict[str, Any]:
        """Fuel totals for one vehicle over its non-deleted fillups."""
        await self.get_owned(user, record_id)
        row = await self.store.fetch_one(
            """
            SELECT COUNT(*) AS fillup_count,
                   COALESCE(SUM(gallons), 0) AS total_gallons,
                   COALESCE(SUM(cost), 0) AS total_cost,
                   AVG(CASE WHEN mpg > 0 THEN mpg END) AS avg_mpg,
                   MAX(odometer_reading) AS latest_odometer
            FROM fuel_fillups
            WHERE vehicle_id = ? AND deleted_at IS NULL
            """,
            (record_id,),
        )
        avg_mpg = row["avg_mpg"]
        return {
            "vehicle_id": record_id,
            "fillup_count": row["fillup_count"],
            "total_gallons": round(float(row["total_gallons"]), 2),
            "total_cost": round(float(row["total_cost"]), 2),
            "avg_mpg": round(avg_mpg, 2) if avg_mpg is not None else None,
            "latest_odometer": row["latest_odometer"],
        }
