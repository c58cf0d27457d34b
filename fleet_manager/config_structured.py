"""
Structured configuration for the fleet manager using typed dataclasses.

This is the AUTHORITATIVE source of truth for all configuration values.
``config.py`` imports from here and exposes flat constants.

Each subsystem gets its own dataclass.

Usage:
    from fleet_manager.config_structured import get_config
    cfg = get_config()
    cfg.dashboard.stats_ttl      # seconds the dashboard KPIs stay cached
    cfg.fuel.default_avg_mpg     # fallback when no fillup has an MPG yet
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class LogFormat(Enum):
    """Log line layout."""
    STRUCTURED = "structured"
    JSON = "json"


@dataclass
class DatabaseConfig:
    """Fleet database location."""

    path: Path = field(
        default_factory=lambda: Path(os.environ.get("FLEET_DB_PATH", "fleet.db"))
    )


@dataclass
class FuelConfig:
    """Fuel fillup arithmetic."""

    mpg_decimals: int = 2
    cost_per_gallon_decimals: int = 3
    min_gallons: float = 0.01
    default_avg_mpg: float = 8.5

    def __post_init__(self):
        if self.min_gallons <= 0:
            raise ValueError(f"min_gallons must be positive, got {self.min_gallons}")


@dataclass
class DashboardConfig:
    """Dashboard aggregation and caching."""

    stats_ttl: int = 300
    chart_ttl: int = 600
    recent_issues_limit: int = 5
    upcoming_services_limit: int = 5
    utilization_limit: int = 10
    license_renewal_window_days: int = 30
    cost_per_day_divisor: int = 30
    open_issue_statuses: List[str] = field(default_factory=lambda: ["open", "in_progress"])
    queued_service_statuses: List[str] = field(default_factory=lambda: ["pending", "in_progress"])


@dataclass
class LoggingConfig:
    """Log level and layout for the API server."""

    level: str = "INFO"
    format: LogFormat = LogFormat.STRUCTURED

    def __post_init__(self):
        if isinstance(self.format, str):
            self.format = LogFormat(self.format)


@dataclass
class SystemConfig:
    """Top-level configuration aggregating all subsystems."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    fuel: FuelConfig = field(default_factory=FuelConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_CONFIG: Optional[SystemConfig] = None


def get_config() -> SystemConfig:
    """Return the singleton SystemConfig instance.

    On first call, instantiates the default SystemConfig. Subsequent
    calls return the same instance so all callers share one source of
    truth.
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = SystemConfig()
    return _CONFIG
