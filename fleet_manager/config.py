"""
Central configuration for the fleet manager.

Flat-constant interface.  Values are derived from the structured config
singleton in ``config_structured.py`` so there is a single source of truth.
Modules that need a value which may be patched at runtime (see
``api/config.py``) read it through the module, e.g. ``cfg.DEFAULT_AVG_MPG``,
never via ``from ... import``.

Config Status Legend
====================
  ACTIVE:      Imported and used by running code.
  PLACEHOLDER: Defined for future use; changing it has no effect yet.

Search for ``# STATUS:`` to locate all annotations.
"""
from pathlib import Path

from .config_structured import get_config as _get_config

_cfg = _get_config()

# ── Paths ──────────────────────────────────────────────────────────────
ROOT_DIR = Path(__file__).parent                  # STATUS: ACTIVE (base path for relative references)
DB_PATH = _cfg.database.path                      # STATUS: ACTIVE (run_compute_mpg.py, run_seed.py default database)

# ── Fuel ───────────────────────────────────────────────────────────────
MPG_DECIMALS = _cfg.fuel.mpg_decimals             # STATUS: ACTIVE (fuel/mpg.py rounding)
COST_PER_GALLON_DECIMALS = _cfg.fuel.cost_per_gallon_decimals  # STATUS: ACTIVE (fuel/mpg.py rounding)
MIN_GALLONS = _cfg.fuel.min_gallons               # STATUS: ACTIVE (api/services/fuel_service.py lower bound)
DEFAULT_AVG_MPG = _cfg.fuel.default_avg_mpg       # STATUS: ACTIVE (dashboard fallback when no fillup has an MPG)

# ── Dashboard ──────────────────────────────────────────────────────────
DASHBOARD_STATS_TTL = _cfg.dashboard.stats_ttl    # STATUS: ACTIVE (seconds; api/routers/dashboard.py)
DASHBOARD_CHART_TTL = _cfg.dashboard.chart_ttl    # STATUS: ACTIVE (seconds; api/routers/dashboard.py)
RECENT_ISSUES_LIMIT = _cfg.dashboard.recent_issues_limit          # STATUS: ACTIVE
UPCOMING_SERVICES_LIMIT = _cfg.dashboard.upcoming_services_limit  # STATUS: ACTIVE
UTILIZATION_LIMIT = _cfg.dashboard.utilization_limit              # STATUS: ACTIVE
LICENSE_RENEWAL_WINDOW_DAYS = _cfg.dashboard.license_renewal_window_days  # STATUS: ACTIVE (renewal_count KPI)
COST_PER_DAY_DIVISOR = _cfg.dashboard.cost_per_day_divisor        # STATUS: ACTIVE (cost_per_day KPI)
OPEN_ISSUE_STATUSES = tuple(_cfg.dashboard.open_issue_statuses)   # STATUS: ACTIVE (open_issues KPI)
QUEUED_SERVICE_STATUSES = tuple(_cfg.dashboard.queued_service_statuses)  # STATUS: ACTIVE (maintenance_queue KPI)
DOWNTIME_TRACKING_ENABLED = False                 # STATUS: PLACEHOLDER (downtime_days is reported as 0 until vehicle downtime is recorded)

# ── Logging ────────────────────────────────────────────────────────────
LOG_LEVEL = _cfg.logging.level                    # STATUS: ACTIVE (api/main.py; "DEBUG", "INFO", "WARNING", "ERROR")
LOG_FORMAT = _cfg.logging.format.value            # STATUS: ACTIVE (api/main.py; "structured" or "json")


# ── Config Validation ──────────────────────────────────────────────

def validate_config() -> list:
    """Check config for common misconfigurations.

    Returns a list of dicts: [{"level": "WARNING"|"ERROR", "message": str}].
    Called on server startup and available via /api/config/validate.
    """
    issues = []

    if str(DB_PATH) != ":memory:" and not Path(DB_PATH).parent.exists():
        issues.append({
            "level": "ERROR",
            "message": f"DB_PATH parent directory ({Path(DB_PATH).parent}) does not exist.",
        })

    if DASHBOARD_STATS_TTL <= 0 or DASHBOARD_CHART_TTL <= 0:
        issues.append({
            "level": "WARNING",
            "message": (
                "Dashboard cache TTLs should be positive; a zero TTL makes every "
                "dashboard request hit the database."
            ),
        })

    if DEFAULT_AVG_MPG <= 0:
        issues.append({
            "level": "ERROR",
            "message": f"DEFAULT_AVG_MPG={DEFAULT_AVG_MPG} must be positive.",
        })

    if LOG_LEVEL.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR"):
        issues.append({
            "level": "WARNING",
            "message": f"LOG_LEVEL='{LOG_LEVEL}' is not a standard level; falling back to INFO.",
        })

    if LICENSE_RENEWAL_WINDOW_DAYS < 1:
        issues.append({
            "level": "WARNING",
            "message": "LICENSE_RENEWAL_WINDOW_DAYS < 1 disables the license renewal reminder.",
        })

    return issues
