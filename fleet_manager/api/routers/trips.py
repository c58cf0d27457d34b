"""Trip endpoints."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..cache.invalidation import invalidate_on_fleet_write
from ..cache.manager import CacheManager
from ..deps.auth import CurrentUser, require_user
from ..deps.providers import get_cache, get_fleet_store
from ..schemas.envelope import ApiResponse
from ..schemas.trips import TripPayload
from ..services.trip_service import TripService

router = APIRouter(prefix="/api/trips", tags=["trips"])


def _service(store=Depends(get_fleet_store)) -> TripService:
    return TripService(store)


@router.get("")
async def list_trips(
    vehicle_id: Optional[int] = None,
    driver_id: Optional[int] = None,
    status: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: CurrentUser = Depends(require_user),
    svc: TripService = Depends(_service),
) -> ApiResponse:
    filters = {"vehicle_id": vehicle_id, "driver_id": driver_id, "status": status}
    data = await svc.list(user, filters, limit=limit, offset=offset)
    return ApiResponse.success(data, company_id=user.company_id, total=len(data))


@router.post("", status_code=201)
async def create_trip(
    payload: TripPayload,
    user: CurrentUser = Depends(require_user),
    svc: TripService = Depends(_service),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.create(user, payload)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)


@router.get("/{trip_id}")
async def get_trip(
    trip_id: int,
    user: CurrentUser = Depends(require_user),
    svc: TripService = Depends(_service),
) -> ApiResponse:
    return ApiResponse.success(await svc.show(user, trip_id), company_id=user.company_id)


@router.put("/{trip_id}")
async def update_trip(
    trip_id: int,
    payload: TripPayload,
    user: CurrentUser = Depends(require_user),
    svc: TripService = Depends(_service),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.update(user, trip_id, payload)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)


@router.delete("/{trip_id}")
async def delete_trip(
    trip_id: int,
    user: CurrentUser = Depends(require_user),
    svc: TripService = Depends(_service),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.delete(user, trip_id)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)
