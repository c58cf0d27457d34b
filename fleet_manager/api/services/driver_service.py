"""Driver records, their user accounts and vehicle assignment."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ...store import new_api_token
from ..deps.auth import CurrentUser
from ..errors import ForbiddenError, ValidationFailedError
from ..schemas.drivers import DriverPayload
from .records import RecordService, vehicle_summary

logger = logging.getLogger(__name__)

LATEST_TRIPS = 10
USER_SUMMARY_FIELDS = ("id", "name", "email", "role")


class DriverService(RecordService):
    """Drivers of the caller's company.

    A driver's name and email live on its ``users`` row (role ``driver``),
    and its vehicle is the one whose ``driver_id`` points at it.
    """

    table = "drivers"
    label = "driver"
    filter_fields = ("status",)

    async def create(self, user: CurrentUser, payload: DriverPayload) -> Dict[str, Any]:
        await self._check(user, payload, driver=None)
        account = await self.store.insert("users", {
            "company_id": user.company_id,
            "name": payload.name,
            "email": payload.email,
            "role": "driver",
            "api_token": new_api_token(),
        })
        row = await self.store.insert("drivers", {
            **payload.driver_columns(),
            "company_id": user.company_id,
            "user_id": account["id"],
        })
        if payload.vehicle_id is not None:
            await self._assign_vehicle(row["id"], payload.vehicle_id)
        logger.info("Created driver %s for company %s", row["id"], user.company_id,
                    extra={"company_id": user.company_id})
        return await self.show(user, row["id"])

    async def update(self, user: CurrentUser, record_id: int, payload: DriverPayload) -> Dict[str, Any]:
        driver = await self.get_owned(user, record_id)
        await self._check(user, payload, driver=driver)
        await self.store.update("drivers", record_id, payload.driver_columns())
        if driver["user_id"] is not None:
            await self.store.update("users", driver["user_id"], {"name": payload.name, "email": payload.email})
        await self._assign_vehicle(record_id, payload.vehicle_id)
        logger.info("Updated driver %s for company %s", record_id, user.company_id,
                    extra={"company_id": user.company_id})
        return await self.show(user, record_id)

    async def before_delete(self, user: CurrentUser, row: Dict[str, Any]) -> None:
        if not user.is_admin:
            raise ForbiddenError("Only admins can delete drivers.")
        await self.store.execute("UPDATE vehicles SET driver_id = NULL WHERE driver_id = ?", (row["id"],))

    async def show(self, user: CurrentUser, record_id: int) -> Dict[str, Any]:
        driver = await super().show(user, record_id)
        account = await self.store.get("users", driver["user_id"]) if driver["user_id"] else None
        driver["user"] = {k: account[k] for k in USER_SUMMARY_FIELDS} if account else None
        driver["trips"] = await self.store.fetch_all(
            "SELECT * FROM trips WHERE driver_id = ? ORDER BY created_at DESC, id DESC LIMIT ?",
            (record_id, LATEST_TRIPS),
        )
        return driver

    async def attach_relations(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if not rows:
            return rows
        users = await self.store.get_many("users", (r["user_id"] for r in rows))
        ids = [r["id"] for r in rows]
        assigned = await self.store.fetch_all(
            f"SELECT * FROM vehicles WHERE driver_id IN ({', '.join('?' for _ in ids)})", ids
        )
        by_driver = {v["driver_id"]: v for v in assigned}
        out = []
        for r in rows:
            account = users.get(r["user_id"]) or {}
            vehicle = by_driver.get(r["id"])
            out.append({
                **r,
                "name": account.get("name"),
                "email": account.get("email"),
                "vehicle_id": vehicle["id"] if vehicle else None,
                "vehicle": vehicle_summary(vehicle),
            })
        return out

    async def _check(self, user: CurrentUser, payload: DriverPayload, driver: Optional[Dict[str, Any]]) -> None:
        errors: Dict[str, List[str]] = {}
        exclude_user = driver["user_id"] if driver else None
        if await self.store.value_exists("users", "email", payload.email, exclude_id=exclude_user):
            errors["email"] = ["The email has already been taken."]
        if await self.store.value_exists(
            "drivers", "license_number", payload.license_number, exclude_id=driver["id"] if driver else None
        ):
            errors["license_number"] = ["The license_number has already been taken."]
        if payload.vehicle_id is not None:
            vehicle = await self.store.get("vehicles", payload.vehicle_id)
            if vehicle is None or vehicle["company_id"] != user.company_id:
                errors["vehicle_id"] = ["The selected vehicle_id is invalid."]
        if errors:
            raise ValidationFailedError("Validation failed", errors)

    async def _assign_vehicle(self, driver_id: int, vehicle_id: Optional[int]) -> None:
        """Make *vehicle_id* the driver's only vehicle (``None`` unassigns)."""
        await self.store.execute(
            "UPDATE vehicles SET driver_id = NULL WHERE driver_id = ? AND id IS NOT ?",
            (driver_id, vehicle_id),
        )
        if vehicle_id is not None:
            await self.store.update("vehicles", vehicle_id, {"driver_id": driver_id})
