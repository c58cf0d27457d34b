"""Database reachability and record counts for the health endpoint."""
from __future__ import annotations

import logging
import time as _time
from datetime import datetime, timezone
from typing import Any, Dict

from ... import __version__
from ...store import COMPANY_TABLES, FleetStore

logger = logging.getLogger(__name__)


class HealthService:
    """Reports whether the fleet database answers and how much it holds."""

    def __init__(self, store: FleetStore) -> None:
        self.store = store

    async def check(self) -> Dict[str, Any]:
        t0 = _time.monotonic()
        try:
            counts = await self.store.table_counts(("companies", *COMPANY_TABLES))
            database = "ok"
            error = None
        except Exception as exc:
            # A broken database is the answer, not an error of the endpoint.
            logger.warning("Health check could not query the database: %s", exc)
            counts = {}
            database = "unavailable"
            error = str(exc)
        return {
            "status": "healthy" if database == "ok" else "degraded",
            "database": database,
            "error": error,
            "tables": counts,
            "server_time": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
            "checked_in_ms": round((_time.monotonic() - t0) * 1000, 1),
        }
