"""Company-scoped CRUD shared by every fleet resource."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ...store import FleetStore
from ...store.schema import UNIQUE_COLUMNS
from ..deps.auth import CurrentUser
from ..errors import ForbiddenError, RecordNotFoundError, ValidationFailedError
from ..schemas.base import RecordPayload

logger = logging.getLogger(__name__)

VEHICLE_SUMMARY_FIELDS = ("id", "name", "make", "model", "license_plate")


def vehicle_summary(row: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    return {k: row.get(k) for k in VEHICLE_SUMMARY_FIELDS}


def driver_summary(row: Optional[Dict[str, Any]], user: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    return {
        "id": row["id"],
        "name": user["name"] if user else None,
        "license_number": row.get("license_number"),
        "phone": row.get("phone"),
    }


class RecordService:
    """CRUD over one fleet table, scoped to the caller's company.

    Subclasses set the class attributes and override ``prepare`` to derive
    columns from the validated payload.  Records of another company raise
    ``ForbiddenError``; unknown IDs raise ``RecordNotFoundError``.
    """

    table: str = ""
    label: str = "record"
    filter_fields: Tuple[str, ...] = ()
    order_by: str = "id DESC"
    # Reference columns validated against the caller's company.
    reference_fields: Tuple[str, ...] = ("vehicle_id", "driver_id")

    def __init__(self, store: FleetStore) -> None:
        self.store = store

    # ── Read ─────────────────────────────────────────────────────────

    async def list(
        self,
        user: CurrentUser,
        filters: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        wanted = {k: v for k, v in (filters or {}).items() if k in self.filter_fields}
        rows = await self.store.list(
            self.table, user.company_id, wanted, order_by=self.order_by, limit=limit, offset=offset
        )
        return await self.attach_relations(rows)

    async def get_owned(self, user: CurrentUser, record_id: int) -> Dict[str, Any]:
        """Fetch a row and enforce company ownership."""
        row = await self.store.get(self.table, record_id)
        if row is None:
            raise RecordNotFoundError(f"{self.label.capitalize()} {record_id} not found")
        if row["company_id"] != user.company_id:
            raise ForbiddenError(f"{self.label.capitalize()} {record_id} belongs to another company")
        return row

    async def show(self, user: CurrentUser, record_id: int) -> Dict[str, Any]:
        row = await self.get_owned(user, record_id)
        return (await self.attach_relations([row]))[0]

    # ── Write ────────────────────────────────────────────────────────

    async def create(self, user: CurrentUser, payload: RecordPayload) -> Dict[str, Any]:
        values = await self.prepare(user, payload.to_record(), existing=None)
        await self.validate(user, values, exclude_id=None)
        row = await self.store.insert(self.table, {**values, "company_id": user.company_id})
        logger.info("Created %s %s for company %s", self.label, row["id"], user.company_id,
                    extra={"company_id": user.company_id})
        await self.after_write(user, row)
        return await self.show(user, row["id"])

    async def update(self, user: CurrentUser, record_id: int, payload: RecordPayload) -> Dict[str, Any]:
        existing = await self.get_owned(user, record_id)
        values = await self.prepare(user, payload.to_record(), existing=existing)
        await self.validate(user, values, exclude_id=record_id)
        row = await self.store.update(self.table, record_id, values)
        logger.info("Updated %s %s for company %s", self.label, record_id, user.company_id,
                    extra={"company_id": user.company_id})
        await self.after_write(user, row)
        return await self.show(user, record_id)

    async def delete(self, user: CurrentUser, record_id: int) -> Dict[str, Any]:
        row = await self.get_owned(user, record_id)
        await self.before_delete(user, row)
        await self.store.delete(self.table, record_id)
        logger.info("Deleted %s %s for company %s", self.label, record_id, user.company_id,
                    extra={"company_id": user.company_id})
        return {"deleted": True, "id": record_id}

    # ── Hooks ────────────────────────────────────────────────────────

    async def prepare(
        self, user: CurrentUser, values: Dict[str, Any], existing: Optional[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """Derive stored columns from the payload.  Default: store as sent."""
        return values

    async def after_write(self, user: CurrentUser, row: Dict[str, Any]) -> None:
        return None

    async def before_delete(self, user: CurrentUser, row: Dict[str, Any]) -> None:
        return None

    # ── Validation ───────────────────────────────────────────────────

    async def validate(self, user: CurrentUser, values: Dict[str, Any], exclude_id: Optional[int]) -> None:
        errors: Dict[str, List[str]] = {}
        for field in self.reference_fields:
            if field not in values or values[field] is None:
                continue
            table = "vehicles" if field == "vehicle_id" else "drivers"
            ref = await self.store.get(table, values[field])
            if ref is None or ref["company_id"] != user.company_id:
                errors.setdefault(field, []).append(f"The selected {field} is invalid.")
        for field in UNIQUE_COLUMNS.get(self.table, ()):
            if await self.store.value_exists(self.table, field, values.get(field), exclude_id=exclude_id):
                errors.setdefault(field, []).append(f"The {field} has already been taken.")
        if errors:
            raise ValidationFailedError("Validation failed", errors)

    # ── Relations ────────────────────────────────────────────────────

    async def attach_relations(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Embed ``vehicle`` / ``driver`` summaries on rows that reference them."""
        if not rows:
            return rows
        vehicles: Dict[int, Dict[str, Any]] = {}
        if "vehicle_id" in rows[0]:
            vehicles = await self.store.get_many("vehicles", (r["vehicle_id"] for r in rows))
        drivers, users = await self._drivers_with_users(r.get("driver_id") for r in rows)
        out = []
        for r in rows:
            item = dict(r)
            if "vehicle_id" in r:
                item["vehicle"] = vehicle_summary(vehicles.get(r["vehicle_id"]))
            if "driver_id" in r:
                drv = drivers.get(r["driver_id"])
                item["driver"] = driver_summary(drv, users.get(drv["user_id"]) if drv else None)
            out.append(item)
        return out

    async def _drivers_with_users(
        self, driver_ids: Iterable[Optional[int]]
    ) -> Tuple[Dict[int, Dict[str, Any]], Dict[int, Dict[str, Any]]]:
        drivers = await self.store.get_many("drivers", driver_ids)
        users = await self.store.get_many("users", (d["user_id"] for d in drivers.values()))
        return drivers, users
