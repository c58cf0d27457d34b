"""Dashboard endpoints: fleet KPIs and the monthly cost chart."""
from __future__ import annotations

import time

from fastapi import APIRouter, Depends

from ..cache.invalidation import dashboard_key
from ..cache.manager import CacheManager
from ..deps.auth import CurrentUser, require_user
from ..deps.providers import get_cache, get_fleet_store
from ..schemas.dashboard import ChartData, DashboardStats
from ..schemas.envelope import ApiResponse
from ..services.dashboard_service import DashboardService

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("")
async def dashboard_stats(
    user: CurrentUser = Depends(require_user),
    cache: CacheManager = Depends(get_cache),
    store=Depends(get_fleet_store),
) -> ApiResponse:
    key = dashboard_key("stats", user.company_id)
    cached = cache.get(key)
    if cached is not None:
        return ApiResponse.from_cached(cached, company_id=user.company_id)
    t0 = time.monotonic()
    stats = await DashboardService(store).get_stats(user.company_id)
    data = DashboardStats(**stats).model_dump()
    elapsed = (time.monotonic() - t0) * 1000
    cache.set(key, data)
    return ApiResponse.success(data, company_id=user.company_id, elapsed_ms=elapsed)


@router.get("/chart")
async def dashboard_chart(
    user: CurrentUser = Depends(require_user),
    cache: CacheManager = Depends(get_cache),
    store=Depends(get_fleet_store),
) -> ApiResponse:
    key = dashboard_key("chart", user.company_id)
    cached = cache.get(key)
    if cached is not None:
        return ApiResponse.from_cached(cached, company_id=user.company_id)
    t0 = time.monotonic()
    chart = await DashboardService(store).get_chart_data(user.company_id)
    data = ChartData(**chart).model_dump()
    elapsed = (time.monotonic() - t0) * 1000
    cache.set(key, data)
    return ApiResponse.success(data, company_id=user.company_id, elapsed_ms=elapsed)
