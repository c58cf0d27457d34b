"""System health endpoint (no authentication)."""
from __future__ import annotations

import time

from fastapi import APIRouter, Depends

from ..cache.manager import CacheManager
from ..deps.providers import get_cache, get_fleet_store
from ..schemas.envelope import ApiResponse
from ..services.health_service import HealthService

router = APIRouter(tags=["health"])


@router.get("/api/health")
async def health(
    cache: CacheManager = Depends(get_cache),
    store=Depends(get_fleet_store),
) -> ApiResponse:
    cached = cache.get("health:quick")
    if cached is not None:
        return ApiResponse.from_cached(cached)
    t0 = time.monotonic()
    data = await HealthService(store).check()
    data["cache"] = cache.stats()
    elapsed = (time.monotonic() - t0) * 1000
    cache.set("health:quick", data)
    warnings = [f"Database unavailable: {data['error']}"] if data["error"] else []
    return ApiResponse.success(data, elapsed_ms=elapsed, warnings=warnings)
