"""Driver endpoints."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..cache.invalidation import invalidate_on_fleet_write
from ..cache.manager import CacheManager
from ..deps.auth import CurrentUser, require_user
from ..deps.providers import get_cache, get_fleet_store
from ..schemas.drivers import DriverPayload
from ..schemas.envelope import ApiResponse
from ..services.driver_service import DriverService

router = APIRouter(prefix="/api/drivers", tags=["drivers"])


def _service(store=Depends(get_fleet_store)) -> DriverService:
    return DriverService(store)


@router.get("")
async def list_drivers(
    status: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: CurrentUser = Depends(require_user),
    svc: DriverService = Depends(_service),
) -> ApiResponse:
    data = await svc.list(user, {"status": status}, limit=limit, offset=offset)
    return ApiResponse.success(data, company_id=user.company_id, total=len(data))


@router.post("", status_code=201)
async def create_driver(
    payload: DriverPayload,
    user: CurrentUser = Depends(require_user),
    svc: DriverService = Depends(_service),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.create(user, payload)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)


@router.get("/{driver_id}")
async def get_driver(
    driver_id: int,
    user: CurrentUser = Depends(require_user),
    svc: DriverService = Depends(_service),
) -> ApiResponse:
    return ApiResponse.success(await svc.show(user, driver_id), company_id=user.company_id)


@router.put("/{driver_id}")
async def update_driver(
    driver_id: int,
    payload: DriverPayload,
    user: CurrentUser = Depends(require_user),
    svc: DriverService = Depends(_service),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.update(user, driver_id, payload)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)


@router.delete("/{driver_id}")
async def delete_driver(
    driver_id: int,
    user: CurrentUser = Depends(require_user),
    svc: DriverService = Depends(_service),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    """Delete a driver (admins only); its vehicle becomes unassigned."""
    data = await svc.delete(user, driver_id)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)
