"""Fuel fillups with MPG maintained on every save."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import fleet_manager.config as cfg

from ...fuel import compute_mpg, cost_per_gallon
from ..deps.auth import CurrentUser
from ..errors import ValidationFailedError
from .records import RecordService

logger = logging.getLogger(__name__)


class FuelFillupService(RecordService):
    """Fuel fillups of the caller's company.

    On create and update, ``cost_per_gallon`` is recomputed and ``mpg`` is
    derived from the vehicle's previous fillup with an odometer reading.
    When no MPG can be derived the stored value is kept.  Deletes are soft.
    """

    table = "fuel_fillups"
    label = "fuel fillup"
    filter_fields = ("vehicle_id",)
    order_by = "fillup_date DESC, id DESC"

    async def prepare(
        self, user: CurrentUser, values: Dict[str, Any], existing: Optional[Dict[str, Any]]
    ) -> Dict[str, Any]:
        if values["gallons"] < cfg.MIN_GALLONS:
            raise ValidationFailedError(
                "Gallons must be greater than 0",
                {"gallons": ["Gallons must be greater than 0"]},
            )
        values["cost_per_gallon"] = cost_per_gallon(values["cost"], values["gallons"])

        previous = await self.previous_fillup(
            values["vehicle_id"], values["fillup_date"], existing["id"] if existing else None
        )
        mpg = None
        if previous is not None:
            mpg = compute_mpg(previous["odometer_reading"], values["odometer_reading"], values["gallons"])
        if mpg is not None:
            values["mpg"] = mpg
        elif existing is None:
            values["mpg"] = None
        return values

    async def previous_fillup(
        self, vehicle_id: int, fillup_date: str, exclude_id: Optional[int]
    ) -> Optional[Dict[str, Any]]:
        """Latest earlier-or-same-day fillup of the vehicle that has a reading."""
        return await self.store.fetch_one(
            """
            SELECT * FROM fuel_fillups
            WHERE vehicle_id = ? AND fillup_date <= ? AND id IS NOT ?
              AND odometer_reading IS NOT NULL AND deleted_at IS NULL
            ORDER BY fillup_date DESC, id DESC
            LIMIT 1
            """,
            (vehicle_id, fillup_date, exclude_id),
        )
