"""Read and adjust fleet settings on a running server."""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

import fleet_manager.config as cfg

from ..cache.invalidation import invalidate_on_config_change
from ..cache.manager import CacheManager
from ..config import RuntimeConfig
from ..deps.auth import require_operator, require_user
from ..deps.providers import get_cache, get_runtime_config
from ..errors import InvalidOperationError
from ..schemas.envelope import ApiResponse

router = APIRouter(prefix="/api/config", tags=["config"])

# (group, label, config attribute) for every setting the status page reports.
_STATUS_ROWS = (
    ("database", "db_path", "DB_PATH"),
    ("fuel", "mpg_decimals", "MPG_DECIMALS"),
    ("fuel", "cost_per_gallon_decimals", "COST_PER_GALLON_DECIMALS"),
    ("fuel", "min_gallons", "MIN_GALLONS"),
    ("fuel", "default_avg_mpg", "DEFAULT_AVG_MPG"),
    ("dashboard", "stats_ttl", "DASHBOARD_STATS_TTL"),
    ("dashboard", "chart_ttl", "DASHBOARD_CHART_TTL"),
    ("dashboard", "recent_issues_limit", "RECENT_ISSUES_LIMIT"),
    ("dashboard", "upcoming_services_limit", "UPCOMING_SERVICES_LIMIT"),
    ("dashboard", "utilization_limit", "UTILIZATION_LIMIT"),
    ("dashboard", "license_renewal_window_days", "LICENSE_RENEWAL_WINDOW_DAYS"),
    ("dashboard", "cost_per_day_divisor", "COST_PER_DAY_DIVISOR"),
    ("dashboard", "downtime_tracking", "DOWNTIME_TRACKING_ENABLED"),
    ("logging", "level", "LOG_LEVEL"),
    ("logging", "format", "LOG_FORMAT"),
)

# Settings that exist but do not yet change behavior.
_PLACEHOLDERS = {
    "DOWNTIME_TRACKING_ENABLED": "vehicle downtime is not recorded; downtime_days is always 0",
}


def config_status() -> Dict[str, Dict[str, Any]]:
    groups: Dict[str, Dict[str, Any]] = {}
    for group, label, attr in _STATUS_ROWS:
        value = getattr(cfg, attr)
        entry: Dict[str, Any] = {"value": str(value) if attr == "DB_PATH" else value, "status": "active"}
        if attr in _PLACEHOLDERS:
            entry.update(status="placeholder", reason=_PLACEHOLDERS[attr])
        groups.setdefault(group, {})[label] = entry
    return groups


@router.get("", dependencies=[Depends(require_user)])
async def get_config(rc: RuntimeConfig = Depends(get_runtime_config)) -> ApiResponse:
    return ApiResponse.success(rc.get_adjustable())


@router.get("/validate", dependencies=[Depends(require_user)])
async def validate_config_endpoint() -> ApiResponse:
    """Issues with the current config, each with a ``level`` and ``message``."""
    issues = cfg.validate_config()
    levels = [issue.get("level") for issue in issues]
    return ApiResponse.success({
        "issues": issues,
        "count": len(issues),
        "errors": levels.count("ERROR"),
        "warnings": levels.count("WARNING"),
    })


@router.get("/status", dependencies=[Depends(require_user)])
async def get_config_status() -> ApiResponse:
    return ApiResponse.success(config_status())


@router.patch("", dependencies=[Depends(require_operator)])
async def patch_config(
    updates: dict = Body(...),
    rc: RuntimeConfig = Depends(get_runtime_config),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    """Change adjustable settings for the whole process.

    These values apply to every company, so the caller must hold the
    operator token rather than a company role.
    """
    try:
        new_state = rc.patch(updates)
    except KeyError as exc:
        raise InvalidOperationError(exc.args[0]) from exc
    except ValueError as exc:
        raise InvalidOperationError(str(exc)) from exc
    invalidate_on_config_change(cache)
    return ApiResponse.success(new_state)
