"""Company settings, team members and the caller's own profile."""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from ...store import FleetStore, new_api_token
from ..deps.auth import CurrentUser
from ..errors import (
    ForbiddenError,
    InvalidOperationError,
    RecordNotFoundError,
    ValidationFailedError,
)
from ..schemas.company import (
    CompanySettingsPayload,
    ProfilePayload,
    TeamMemberCreate,
    settings_from_company,
)

logger = logging.getLogger(__name__)

MEMBER_FIELDS = ("id", "name", "email", "role", "company_id", "created_at")


def _member(row: Dict[str, Any]) -> Dict[str, Any]:
    return {k: row.get(k) for k in MEMBER_FIELDS}


class CompanyService:
    """Administration of the caller's company."""

    def __init__(self, store: FleetStore) -> None:
        self.store = store

    async def _company(self, user: CurrentUser) -> Dict[str, Any]:
        company = await self.store.get("companies", user.company_id)
        if company is None:
            raise RecordNotFoundError(f"Company {user.company_id} not found")
        return company

    # ── Settings ─────────────────────────────────────────────────────

    async def get_settings(self, user: CurrentUser) -> Dict[str, str]:
        return settings_from_company(await self._company(user))

    async def update_settings(self, user: CurrentUser, payload: CompanySettingsPayload) -> Dict[str, str]:
        await self._company(user)
        columns = payload.company_columns()
        if "name" in columns and not columns["name"]:
            raise ValidationFailedError("Validation failed", {"company_name": ["The company name cannot be empty."]})
        company = await self.store.update("companies", user.company_id, columns)
        logger.info("Updated settings for company %s (%s)", user.company_id, ", ".join(sorted(columns)) or "no fields",
                    extra={"company_id": user.company_id})
        return settings_from_company(company)

    # ── Team ─────────────────────────────────────────────────────────

    async def list_members(self, user: CurrentUser) -> List[Dict[str, Any]]:
        rows = await self.store.list("users", user.company_id, order_by="created_at, id")
        return [_member(r) for r in rows]

    async def add_member(self, user: CurrentUser, payload: TeamMemberCreate) -> Dict[str, Any]:
        """Invite a colleague as an admin of the company.

        The member's name defaults to the local part of the email.  The
        returned dict carries the new member's ``api_token``; it is the only
        time the token is shown.
        """
        email = str(payload.email)
        if await self.store.value_exists("users", "email", email):
            raise ValidationFailedError("Validation failed", {"email": ["The email has already been taken."]})
        row = await self.store.create_user(
            user.company_id, email.split("@", 1)[0], email, role="admin", api_token=new_api_token()
        )
        logger.info("Added team member %s to company %s", row["id"], user.company_id,
                    extra={"company_id": user.company_id})
        return {**_member(row), "api_token": row["api_token"]}

    async def remove_member(self, user: CurrentUser, member_id: int) -> Dict[str, Any]:
        row = await self.store.get("users", member_id)
        if row is None:
            raise RecordNotFoundError(f"User {member_id} not found")
        if row["company_id"] != user.company_id:
            raise ForbiddenError(f"User {member_id} belongs to another company")
        if row["id"] == user.id:
            raise InvalidOperationError("You cannot remove yourself")
        await self.store.delete("users", member_id)
        logger.info("Removed team member %s from company %s", member_id, user.company_id,
                    extra={"company_id": user.company_id})
        return {"deleted": True, "id": member_id}

    # ── Profile ──────────────────────────────────────────────────────

    async def get_profile(self, user: CurrentUser) -> Dict[str, Any]:
        row = await self.store.get("users", user.id)
        return _member(row)

    async def update_profile(self, user: CurrentUser, payload: ProfilePayload) -> Dict[str, Any]:
        values = payload.to_record()
        if await self.store.value_exists("users", "email", values["email"], exclude_id=user.id):
            raise ValidationFailedError("Validation failed", {"email": ["The email has already been taken."]})
        row = await self.store.update("users", user.id, values)
        return _member(row)
