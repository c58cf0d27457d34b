"""Vehicle position reports."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from ...store import utc_now
from ..deps.auth import CurrentUser
from .records import RecordService


class LocationService(RecordService):
    """Positions reported by drivers' phones or trackers.

    A report without ``recorded_at`` is stamped with the server time; the
    reporting user is always recorded.
    """

    table = "vehicle_locations"
    label = "vehicle location"
    filter_fields = ("vehicle_id",)
    order_by = "recorded_at DESC, id DESC"

    async def prepare(
        self, user: CurrentUser, values: Dict[str, Any], existing: Optional[Dict[str, Any]]
    ) -> Dict[str, Any]:
        values["recorded_at"] = values.get("recorded_at") or utc_now()
        values["user_id"] = user.id
        return values

    async def latest(self, user: CurrentUser) -> List[Dict[str, Any]]:
        """Most recent position of every vehicle in the company."""
        rows = await self.store.fetch_all(
            """
            SELECT l.* FROM vehicle_locations l
            WHERE l.company_id = ? AND l.vehicle_id IS NOT NULL
              AND l.id = (
                SELECT l2.id FROM vehicle_locations l2
                WHERE l2.vehicle_id = l.vehicle_id
                ORDER BY l2.recorded_at DESC, l2.id DESC
                LIMIT 1
              )
            ORDER BY l.vehicle_id
            """,
            (user.company_id,),
        )
        return await self.attach_relations(rows)
