"""Authentication dependency resolving API tokens to company users."""
from __future__ import annotations

import logging
import secrets
from typing import Optional

from fastapi import Depends, HTTPException, Request
from pydantic import BaseModel

from ...store import FleetStore
from ..config import ApiSettings
from .providers import get_fleet_store, get_settings

logger = logging.getLogger(__name__)


class CurrentUser(BaseModel):
    """The authenticated caller and the company its requests are scoped to."""

    id: int
    company_id: int
    name: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def _extract_token(request: Request) -> Optional[str]:
    """Read ``Authorization: Bearer <token>``, falling back to ``X-API-Key``."""
    token: Optional[str] = None
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
    if not token:
        token = request.headers.get("X-API-Key", "").strip() or None
    return token


async def require_user(
    request: Request,
    store: FleetStore = Depends(get_fleet_store),
) -> CurrentUser:
    """FastAPI dependency returning the user that owns the request's API token.

    Raises
    ------
    HTTPException(401)
        If the token is missing or unknown.
    HTTPException(403)
        If the user is not attached to a company.
    """
    token = _extract_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Missing authentication token")

    row = await store.get_user_by_token(token)
    if row is None:
        logger.info("Rejected unknown API token on %s", request.url.path)
        raise HTTPException(status_code=401, detail="Invalid authentication token")
    if row.get("company_id") is None:
        raise HTTPException(status_code=403, detail="User is not attached to a company")

    return CurrentUser(
        id=row["id"],
        company_id=row["company_id"],
        name=row["name"],
        email=row["email"],
        role=row["role"],
    )


def require_operator(
    request: Request,
    settings: ApiSettings = Depends(get_settings),
) -> None:
    """Gate for process-wide changes, which no single company may make.

    The caller must send ``X-Admin-Token`` matching ``FLEET_API_ADMIN_TOKEN``.
    Without a configured token the gated endpoints are closed.
    """
    if not settings.admin_token:
        raise HTTPException(status_code=403, detail="Runtime config changes are disabled on this server")
    sent = request.headers.get("X-Admin-Token", "")
    if not secrets.compare_digest(sent.encode(), settings.admin_token.encode()):
        logger.warning("Rejected operator token on %s", request.url.path)
        raise HTTPException(status_code=403, detail="Operator token required")
