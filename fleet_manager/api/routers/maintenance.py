"""Service and inspection endpoints."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..cache.invalidation import invalidate_on_fleet_write
from ..cache.manager import CacheManager
from ..deps.auth import CurrentUser, require_user
from ..deps.providers import get_cache, get_fleet_store
from ..schemas.envelope import ApiResponse
from ..schemas.maintenance import InspectionPayload, ServicePayload
from ..services.maintenance_service import InspectionService, ServiceRecordService

router = APIRouter(prefix="/api", tags=["maintenance"])


def _services(store=Depends(get_fleet_store)) -> ServiceRecordService:
    return ServiceRecordService(store)


def _inspections(store=Depends(get_fleet_store)) -> InspectionService:
    return InspectionService(store)


# ── Services ─────────────────────────────────────────────────────────


@router.get("/services")
async def list_services(
    vehicle_id: Optional[int] = None,
    status: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: CurrentUser = Depends(require_user),
    svc: ServiceRecordService = Depends(_services),
) -> ApiResponse:
    data = await svc.list(user, {"vehicle_id": vehicle_id, "status": status}, limit=limit, offset=offset)
    return ApiResponse.success(data, company_id=user.company_id, total=len(data))


@router.post("/services", status_code=201)
async def create_service(
    payload: ServicePayload,
    user: CurrentUser = Depends(require_user),
    svc: ServiceRecordService = Depends(_services),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.create(user, payload)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)


@router.get("/services/{service_id}")
async def get_service(
    service_id: int,
    user: CurrentUser = Depends(require_user),
    svc: ServiceRecordService = Depends(_services),
) -> ApiResponse:
    return ApiResponse.success(await svc.show(user, service_id), company_id=user.company_id)


@router.put("/services/{service_id}")
async def update_service(
    service_id: int,
    payload: ServicePayload,
    user: CurrentUser = Depends(require_user),
    svc: ServiceRecordService = Depends(_services),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.update(user, service_id, payload)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)


@router.delete("/services/{service_id}")
async def delete_service(
    service_id: int,
    user: CurrentUser = Depends(require_user),
    svc: ServiceRecordService = Depends(_services),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.delete(user, service_id)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)


# ── Inspections ──────────────────────────────────────────────────────


@router.get("/inspections")
async def list_inspections(
    vehicle_id: Optional[int] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: CurrentUser = Depends(require_user),
    svc: InspectionService = Depends(_inspections),
) -> ApiResponse:
    data = await svc.list(user, {"vehicle_id": vehicle_id}, limit=limit, offset=offset)
    return ApiResponse.success(data, company_id=user.company_id, total=len(data))


@router.post("/inspections", status_code=201)
async def create_inspection(
    payload: InspectionPayload,
    user: CurrentUser = Depends(require_user),
    svc: InspectionService = Depends(_inspections),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.create(user, payload)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)


@router.get("/inspections/{inspection_id}")
async def get_inspection(
    inspection_id: int,
    user: CurrentUser = Depends(require_user),
    svc: InspectionService = Depends(_inspections),
) -> ApiResponse:
    return ApiResponse.success(await svc.show(user, inspection_id), company_id=user.company_id)


@router.put("/inspections/{inspection_id}")
async def update_inspection(
    inspection_id: int,
    payload: InspectionPayload,
    user: CurrentUser = Depends(require_user),
    svc: InspectionService = Depends(_inspections),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.update(user, inspection_id, payload)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)


@router.delete("/inspections/{inspection_id}")
async def delete_inspection(
    inspection_id: int,
    user: CurrentUser = Depends(require_user),
    svc: InspectionService = Depends(_inspections),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.delete(user, inspection_id)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)
