"""The tail of this process's ``fleet_manager`` log output, per company."""
from __future__ import annotations

import logging
from collections import deque
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from ..deps.auth import CurrentUser, require_user
from ..schemas.envelope import ApiResponse

router = APIRouter(prefix="/api/logs", tags=["logs"])

_ROOT_LOGGER = "fleet_manager"


class RecentLogHandler(logging.Handler):
    """Keeps the last ``capacity`` INFO-and-above records as plain dicts.

    Records logged with ``extra={"company_id": ...}`` keep that company;
    everything else is process-level and belongs to no company.
    """

    def __init__(self, capacity: int = 500) -> None:
        super().__init__(level=logging.INFO)
        self.records: deque = deque(maxlen=capacity)

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append({
            "ts": record.created,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "company_id": getattr(record, "company_id", None),
        })

    def tail(self, last_n: int, min_level: Optional[str] = None, company_id: Optional[int] = None) -> List[Dict]:
        """The newest *last_n* records of *company_id*, or of the whole process when None."""
        entries = list(self.records)
        if company_id is not None:
            entries = [e for e in entries if e["company_id"] == company_id]
        if min_level:
            floor = logging.getLevelName(min_level.upper())
            if isinstance(floor, int):
                entries = [e for e in entries if logging.getLevelName(e["level"]) >= floor]
        return entries[-last_n:]


recent_logs = RecentLogHandler()


def setup_log_buffer() -> None:
    logger = logging.getLogger(_ROOT_LOGGER)
    if recent_logs not in logger.handlers:
        logger.addHandler(recent_logs)


def teardown_log_buffer() -> None:
    logging.getLogger(_ROOT_LOGGER).removeHandler(recent_logs)
    recent_logs.records.clear()


@router.get("")
async def get_logs(
    last_n: int = Query(default=100, ge=1, le=500),
    level: Optional[str] = None,
    user: CurrentUser = Depends(require_user),
) -> ApiResponse:
    """The caller's company's records, newest last.

    ``level`` keeps that level and anything more severe.
    """
    entries = recent_logs.tail(last_n, level, company_id=user.company_id)
    return ApiResponse.success(entries, company_id=user.company_id, total=len(entries))
