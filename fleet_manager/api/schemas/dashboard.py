"""Dashboard response schemas."""
from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict


class DashboardStats(BaseModel):
    """Fleet KPIs for the dashboard summary.

    Monthly maps are keyed by month number (``"1"`` .. ``"12"``) and only
    hold months with activity in the current year.
    """

    model_config = ConfigDict(extra="allow")

    total_vehicles: int = 0
    active_vehicles: int = 0
    total_drivers: int = 0
    active_drivers: int = 0
    total_trips: int = 0
    completed_trips: int = 0
    monthly_trips: Dict[str, int] = {}
    monthly_expenses: Dict[str, float] = {}
    monthly_fuel_costs: Dict[str, float] = {}
    vehicle_utilization: List[Dict[str, Any]] = []
    recent_issues: List[Dict[str, Any]] = []
    upcoming_services: List[Dict[str, Any]] = []
    total_expenses: float = 0.0
    total_cost: float = 0.0
    avg_mpg: float = 0.0
    cost_per_mile: float = 0.0
    cost_per_day: float = 0.0
    open_issues: int = 0
    maintenance_queue: int = 0
    overdue_reminders: int = 0
    renewal_count: int = 0
    downtime_days: int = 0
    cost_increase_percent: float = 0.0


class ChartData(BaseModel):
    """Twelve monthly points per series, January first."""

    labels: List[str]
    expenses: List[float]
    revenue: List[float]
