"""Vehicle location endpoints."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..deps.auth import CurrentUser, require_user
from ..deps.providers import get_fleet_store
from ..schemas.envelope import ApiResponse
from ..schemas.locations import LocationPayload
from ..services.location_service import LocationService

router = APIRouter(prefix="/api/vehicle-locations", tags=["locations"])


def _service(store=Depends(get_fleet_store)) -> LocationService:
    return LocationService(store)


@router.get("")
async def list_locations(
    vehicle_id: Optional[int] = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    user: CurrentUser = Depends(require_user),
    svc: LocationService = Depends(_service),
) -> ApiResponse:
    data = await svc.list(user, {"vehicle_id": vehicle_id}, limit=limit, offset=offset)
    return ApiResponse.success(data, company_id=user.company_id, total=len(data))


@router.get("/latest")
async def latest_locations(
    user: CurrentUser = Depends(require_user),
    svc: LocationService = Depends(_service),
) -> ApiResponse:
    """Latest reported position of each vehicle."""
    data = await svc.latest(user)
    return ApiResponse.success(data, company_id=user.company_id, total=len(data))


@router.post("", status_code=201)
async def report_location(
    payload: LocationPayload,
    user: CurrentUser = Depends(require_user),
    svc: LocationService = Depends(_service),
) -> ApiResponse:
    return ApiResponse.success(await svc.create(user, payload), company_id=user.company_id)
