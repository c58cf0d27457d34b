"""Process-wide resources handed to endpoints through ``Depends()``."""
from __future__ import annotations

from functools import lru_cache

from ..config import ApiSettings, RuntimeConfig


@lru_cache
def get_settings() -> ApiSettings:
    return ApiSettings()


@lru_cache
def get_runtime_config() -> RuntimeConfig:
    return RuntimeConfig()


# Built on first use so the stores open inside the running event loop.
# Tests assign these directly.
_fleet_store = None
_job_store = None
_job_runner = None
_cache = None


def get_fleet_store():
    global _fleet_store
    if _fleet_store is None:
        from ...store import FleetStore

        _fleet_store = FleetStore(get_settings().db_path)
    return _fleet_store


def get_job_store():
    global _job_store
    if _job_store is None:
        from ..jobs.store import JobStore

        _job_store = JobStore(get_settings().job_db_path)
    return _job_store


def get_job_runner():
    """Runner bound to the job store; one recompute at a time per company."""
    global _job_runner
    if _job_runner is None:
        from ..jobs.runner import JobRunner

        _job_runner = JobRunner(get_job_store())
    return _job_runner


def get_cache():
    global _cache
    if _cache is None:
        from ..cache.manager import CacheManager

        _cache = CacheManager()
    return _cache


def reset() -> None:
    """Forget every resource and cached setting; the next request rebuilds them."""
    global _fleet_store, _job_store, _job_runner, _cache
    _fleet_store = _job_store = _job_runner = _cache = None
    get_settings.cache_clear()
    get_runtime_config.cache_clear()
