"""Event-driven cache invalidation helpers."""
from __future__ import annotations

from .manager import CacheManager


def dashboard_key(kind: str, company_id: int) -> str:
    """Cache key for one company's dashboard payload (``stats`` or ``chart``)."""
    return f"dashboard:{kind}:{company_id}"


def invalidate_on_fleet_write(cache: CacheManager, company_id: int) -> int:
    """Clear a company's dashboard after any of its fleet records change."""
    return cache.invalidate_pattern(f"dashboard:*:{company_id}")


def invalidate_on_config_change(cache: CacheManager) -> None:
    """Clear all caches when runtime config is patched."""
    cache.invalidate_all()
