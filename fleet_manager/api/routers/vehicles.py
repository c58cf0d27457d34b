"""Vehicle endpoints."""
from __future__ import annotations

import time
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..cache.invalidation import invalidate_on_fleet_write
from ..cache.manager import CacheManager
from ..deps.auth import CurrentUser, require_user
from ..deps.providers import get_cache, get_fleet_store
from ..schemas.envelope import ApiResponse
from ..schemas.vehicles import VehiclePayload
from ..services.vehicle_service import VehicleService

router = APIRouter(prefix="/api/vehicles", tags=["vehicles"])


def _service(store=Depends(get_fleet_store)) -> VehicleService:
    return VehicleService(store)


@router.get("")
async def list_vehicles(
    status: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: CurrentUser = Depends(require_user),
    svc: VehicleService = Depends(_service),
) -> ApiResponse:
    t0 = time.monotonic()
    data = await svc.list(user, {"status": status}, limit=limit, offset=offset)
    elapsed = (time.monotonic() - t0) * 1000
    return ApiResponse.success(data, company_id=user.company_id, total=len(data), elapsed_ms=elapsed)


@router.post("", status_code=201)
async def create_vehicle(
    payload: VehiclePayload,
    user: CurrentUser = Depends(require_user),
    svc: VehicleService = Depends(_service),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.create(user, payload)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)


@router.get("/{vehicle_id}")
async def get_vehicle(
    vehicle_id: int,
    user: CurrentUser = Depends(require_user),
    svc: VehicleService = Depends(_service),
) -> ApiResponse:
    return ApiResponse.success(await svc.show(user, vehicle_id), company_id=user.company_id)


@router.get("/{vehicle_id}/fuel-economy")
async def vehicle_fuel_economy(
    vehicle_id: int,
    user: CurrentUser = Depends(require_user),
    svc: VehicleService = Depends(_service),
) -> ApiResponse:
    return ApiResponse.success(await svc.fuel_economy(user, vehicle_id), company_id=user.company_id)


@router.put("/{vehicle_id}")
async def update_vehicle(
    vehicle_id: int,
    payload: VehiclePayload,
    user: CurrentUser = Depends(require_user),
    svc: VehicleService = Depends(_service),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.update(user, vehicle_id, payload)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)


@router.delete("/{vehicle_id}")
async def delete_vehicle(
    vehicle_id: int,
    user: CurrentUser = Depends(require_user),
    svc: VehicleService = Depends(_service),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.delete(user, vehicle_id)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)
