"""Dependency injection providers."""
from .auth import CurrentUser, require_user
from .providers import (
    get_cache,
    get_fleet_store,
    get_job_runner,
    get_job_store,
    get_runtime_config,
    get_settings,
)

__all__ = [
    "CurrentUser",
    "get_cache",
    "get_fleet_store",
    "get_job_runner",
    "get_job_store",
    "get_runtime_config",
    "get_settings",
    "require_user",
]
