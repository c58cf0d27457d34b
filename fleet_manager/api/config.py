"""API process settings and the runtime-patchable subset of fleet config."""
from __future__ import annotations

import logging
from typing import Any, Dict, NamedTuple, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

import fleet_manager.config as cfg

logger = logging.getLogger(__name__)


class ApiSettings(BaseSettings):
    """Read once from ``FLEET_API_*`` environment variables or ``.env``.

    The database path and log level default to the fleet config
    (``FLEET_DB_PATH``, ``LoggingConfig``) so the server, the CLI scripts and
    ``validate_config()`` agree unless a ``FLEET_API_*`` value overrides them.
    """

    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: str = "http://localhost:5173,http://localhost:3000"
    db_path: str = Field(default_factory=lambda: str(cfg.DB_PATH))
    job_db_path: str = "fleet_jobs.db"
    log_level: str = Field(default_factory=lambda: cfg.LOG_LEVEL)
    # Shared secret for process-wide endpoints (PATCH /api/config); unset disables them.
    admin_token: Optional[str] = None

    model_config = {"env_prefix": "FLEET_API_"}


class _Range(NamedTuple):
    low: float
    high: float
    low_open: bool = False

    def admits(self, value: float) -> bool:
        above = value > self.low if self.low_open else value >= self.low
        return above and value <= self.high

    def describe(self) -> str:
        opening = "(" if self.low_open else "["
        return f"Must be in {opening}{self.low}, {self.high}]"


# Settings an admin may change on a live server, with their allowed range.
ADJUSTABLE: Dict[str, _Range] = {
    "DASHBOARD_STATS_TTL": _Range(0, 86400),
    "DASHBOARD_CHART_TTL": _Range(0, 86400),
    "DEFAULT_AVG_MPG": _Range(0.0, 200.0, low_open=True),
    "LICENSE_RENEWAL_WINDOW_DAYS": _Range(1, 365),
    "RECENT_ISSUES_LIMIT": _Range(1, 50),
    "UPCOMING_SERVICES_LIMIT": _Range(1, 50),
}


def _coerce(key: str, value: Any, like: Any) -> Any:
    kind = type(like)
    # JSON true would pass int(); 1.5 would silently truncate.
    if isinstance(value, bool) or (kind is int and isinstance(value, float) and not value.is_integer()):
        raise ValueError(f"Cannot coerce {key}={value!r} to {kind.__name__}")
    try:
        return kind(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Cannot coerce {key}={value!r} to {kind.__name__}") from exc


class RuntimeConfig:
    """Reads and patches the ``ADJUSTABLE`` names on ``fleet_manager.config``.

    Dashboard code reads ``cfg.X`` at call time, so a patch takes effect on
    the next request.
    """

    def __init__(self) -> None:
        self._cfg = cfg

    def get_adjustable(self) -> Dict[str, Any]:
        return {key: getattr(self._cfg, key) for key in sorted(ADJUSTABLE)}

    def patch(self, updates: Dict[str, Any]) -> Dict[str, Any]:
        """Apply *updates* all together or not at all.

        Raises ``KeyError`` naming keys outside ``ADJUSTABLE`` and
        ``ValueError`` for a value of the wrong type or out of range.
        """
        unknown = sorted(set(updates) - set(ADJUSTABLE))
        if unknown:
            raise KeyError(f"Keys not adjustable: {unknown}")
        staged: Dict[str, Any] = {}
        for key, value in updates.items():
            coerced = _coerce(key, value, getattr(self._cfg, key))
            allowed = ADJUSTABLE[key]
            if not allowed.admits(coerced):
                raise ValueError(f"Invalid value for {key}: {coerced!r}. {allowed.describe()}")
            staged[key] = coerced
        for key, value in staged.items():
            setattr(self._cfg, key, value)
            logger.info("Config %s set to %r", key, value)
        return self.get_adjustable()
