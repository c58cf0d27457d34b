"""Fuel fillup endpoints, including the batch MPG recompute job."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..cache.invalidation import invalidate_on_fleet_write
from ..cache.manager import CacheManager
from ..config import ApiSettings
from ..deps.auth import CurrentUser, require_user
from ..deps.providers import get_cache, get_fleet_store, get_job_runner, get_job_store, get_settings
from ..errors import ForbiddenError, RecordNotFoundError
from ..jobs.models import JobType
from ..jobs.mpg_job import execute_recompute_mpg_job
from ..jobs.runner import JobRunner
from ..jobs.store import JobStore
from ..schemas.envelope import ApiResponse
from ..schemas.fuel import FuelFillupPayload, RecomputeMpgQueued, RecomputeMpgRequest
from ..services.fuel_service import FuelFillupService

router = APIRouter(prefix="/api/fuel-fillups", tags=["fuel"])


def _service(store=Depends(get_fleet_store)) -> FuelFillupService:
    return FuelFillupService(store)


@router.get("")
async def list_fillups(
    vehicle_id: Optional[int] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: CurrentUser = Depends(require_user),
    svc: FuelFillupService = Depends(_service),
) -> ApiResponse:
    data = await svc.list(user, {"vehicle_id": vehicle_id}, limit=limit, offset=offset)
    return ApiResponse.success(data, company_id=user.company_id, total=len(data))


@router.post("/recompute-mpg")
async def recompute_mpg(
    req: Optional[RecomputeMpgRequest] = None,
    user: CurrentUser = Depends(require_user),
    settings: ApiSettings = Depends(get_settings),
    store: JobStore = Depends(get_job_store),
    runner: JobRunner = Depends(get_job_runner),
    cache: CacheManager = Depends(get_cache),
    fleet=Depends(get_fleet_store),
) -> ApiResponse:
    """Queue a recompute of stored MPG for the company's fillups."""
    req = req or RecomputeMpgRequest()
    if req.vehicle_id is not None:
        vehicle = await fleet.get("vehicles", req.vehicle_id)
        if vehicle is None:
            raise RecordNotFoundError(f"Vehicle {req.vehicle_id} not found")
        if vehicle["company_id"] != user.company_id:
            raise ForbiddenError(f"Vehicle {req.vehicle_id} belongs to another company")

    params = {"db_path": settings.db_path, "company_id": user.company_id, "vehicle_id": req.vehicle_id}
    rec = await store.create_job(JobType.recompute_mpg.value, params, company_id=user.company_id)
    await runner.submit(
        rec.job_id,
        execute_recompute_mpg_job,
        params,
        company_id=user.company_id,
        on_success=lambda _result: invalidate_on_fleet_write(cache, user.company_id),
    )
    resp = RecomputeMpgQueued(job_id=rec.job_id, job_type=rec.job_type, vehicle_id=req.vehicle_id)
    return ApiResponse.success(resp.model_dump(), company_id=user.company_id)


@router.post("", status_code=201)
async def create_fillup(
    payload: FuelFillupPayload,
    user: CurrentUser = Depends(require_user),
    svc: FuelFillupService = Depends(_service),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.create(user, payload)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)


@router.get("/{fillup_id}")
async def get_fillup(
    fillup_id: int,
    user: CurrentUser = Depends(require_user),
    svc: FuelFillupService = Depends(_service),
) -> ApiResponse:
    return ApiResponse.success(await svc.show(user, fillup_id), company_id=user.company_id)


@router.put("/{fillup_id}")
async def update_fillup(
    fillup_id: int,
    payload: FuelFillupPayload,
    user: CurrentUser = Depends(require_user),
    svc: FuelFillupService = Depends(_service),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.update(user, fillup_id, payload)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)


@router.delete("/{fillup_id}")
async def delete_fillup(
    fillup_id: int,
    user: CurrentUser = Depends(require_user),
    svc: FuelFillupService = Depends(_service),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.delete(user, fillup_id)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)
