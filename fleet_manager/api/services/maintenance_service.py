"""Service (maintenance) and inspection records."""
from __future__ import annotations

from typing import Any, Dict, Optional

from ..deps.auth import CurrentUser
from .records import RecordService


def _default(values: Dict[str, Any], key: str, existing: Optional[Dict[str, Any]], fallback: str) -> None:
    # Unset status-like fields keep the stored value on update.
    if values.get(key) is None:
        values[key] = existing[key] if existing else fallback


class ServiceRecordService(RecordService):
    """Maintenance services.  ``notes`` is mirrored into ``description``."""

    table = "services"
    label = "service"
    filter_fields = ("vehicle_id", "status")
    order_by = "service_date DESC, id DESC"

    async def prepare(
        self, user: CurrentUser, values: Dict[str, Any], existing: Optional[Dict[str, Any]]
    ) -> Dict[str, Any]:
        _default(values, "status", existing, "completed")
        values["description"] = values.get("notes")
        return values


class InspectionService(RecordService):
    table = "inspections"
    label = "inspection"
    filter_fields = ("vehicle_id",)
    order_by = "inspection_date DESC, id DESC"

    async def prepare(
        self, user: CurrentUser, values: Dict[str, Any], existing: Optional[Dict[str, Any]]
    ) -> Dict[str, Any]:
        _default(values, "result", existing, "pending")
        _default(values, "status", existing, "passed")
        return values
