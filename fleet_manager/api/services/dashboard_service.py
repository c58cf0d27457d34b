"""Dashboard aggregates computed with SQL over one company's records."""
from __future__ import annotations

import calendar
import datetime as dt
import logging
from typing import Any, Dict, List, Optional, Sequence

import fleet_manager.config as cfg

from ...store import FleetStore
from .records import vehicle_summary

logger = logging.getLogger(__name__)

MONTH_LABELS = [calendar.month_abbr[m] for m in range(1, 13)]


def _placeholders(values: Sequence[Any]) -> str:
    return ", ".join("?" for _ in values)


class DashboardService:
    """Fleet KPIs and monthly series for the dashboard page.

    Every query is scoped to one company.  ``today`` can be injected so
    date-window KPIs are deterministic in tests.
    """

    def __init__(self, store: FleetStore) -> None:
        self.store = store

    async def _count(self, sql: str, params: Sequence[Any]) -> int:
        return int(await self.store.fetch_value(sql, params) or 0)

    async def _sum(self, sql: str, params: Sequence[Any]) -> float:
        return float(await self.store.fetch_value(sql, params) or 0.0)

    async def _monthly(self, table: str, date_col: str, value_sql: str, company_id: int, year: str,
                       extra: str = "") -> Dict[str, float]:
        """``{month number as str: value}`` for months with any rows this year."""
        rows = await self.store.fetch_all(
            f"""
            SELECT CAST(strftime('%m', {date_col}) AS INTEGER) AS month, {value_sql} AS value
            FROM {table}
            WHERE company_id = ? AND strftime('%Y', {date_col}) = ? {extra}
            GROUP BY month ORDER BY month
            """,
            (company_id, year),
        )
        return {str(r["month"]): r["value"] for r in rows}

    async def get_stats(self, company_id: int, today: Optional[dt.date] = None) -> Dict[str, Any]:
        today = today or dt.date.today()
        year = str(today.year)
        cid = (company_id,)

        total_vehicles = await self._count("SELECT COUNT(*) FROM vehicles WHERE company_id = ?", cid)
        active_vehicles = await self._count(
            "SELECT COUNT(*) FROM vehicles WHERE company_id = ? AND status = 'active'", cid)
        total_drivers = await self._count("SELECT COUNT(*) FROM drivers WHERE company_id = ?", cid)
        active_drivers = await self._count(
            "SELECT COUNT(*) FROM drivers WHERE company_id = ? AND status = 'active'", cid)
        total_trips = await self._count("SELECT COUNT(*) FROM trips WHERE company_id = ?", cid)
        completed_trips = await self._count(
            "SELECT COUNT(*) FROM trips WHERE company_id = ? AND status = 'completed'", cid)

        monthly_trips = await self._monthly("trips", "created_at", "COUNT(*)", company_id, year)
        monthly_expenses = await self._monthly("expenses", "expense_date", "SUM(amount)", company_id, year)
        monthly_fuel_costs = await self._monthly(
            "fuel_fillups", "fillup_date", "SUM(cost)", company_id, year, extra="AND deleted_at IS NULL")

        vehicle_utilization = await self.store.fetch_all(
            """
            SELECT vehicle_id, COUNT(*) AS trip_count, SUM(distance) AS total_distance
            FROM trips
            WHERE company_id = ? AND distance IS NOT NULL
            GROUP BY vehicle_id
            ORDER BY total_distance DESC, vehicle_id
            LIMIT ?
            """,
            (company_id, cfg.UTILIZATION_LIMIT),
        )

        recent_issues = await self._with_vehicles(await self.store.fetch_all(
            """
            SELECT id, vehicle_id, title, priority, created_at FROM issues
            WHERE company_id = ? ORDER BY created_at DESC, id DESC LIMIT ?
            """,
            (company_id, cfg.RECENT_ISSUES_LIMIT),
        ))
        upcoming_services = await self._with_vehicles(await self.store.fetch_all(
            """
            SELECT id, vehicle_id, service_type, service_date, status FROM services
            WHERE company_id = ? AND service_date >= ? ORDER BY service_date, id LIMIT ?
            """,
            (company_id, today.isoformat(), cfg.UPCOMING_SERVICES_LIMIT),
        ))

        total_expenses = await self._sum(
            "SELECT SUM(amount) FROM expenses WHERE company_id = ? AND strftime('%Y', created_at) = ?",
            (company_id, year),
        )
        total_cost = total_expenses + sum(float(v) for v in monthly_fuel_costs.values())

        avg_mpg = await self.store.fetch_value(
            "SELECT AVG(mpg) FROM fuel_fillups WHERE company_id = ? AND mpg > 0 AND deleted_at IS NULL", cid)
        if avg_mpg is None:
            avg_mpg = cfg.DEFAULT_AVG_MPG

        total_distance = await self._sum(
            "SELECT SUM(distance) FROM trips WHERE company_id = ? AND distance IS NOT NULL", cid)
        cost_per_mile = total_cost / total_distance if total_distance > 0 else 0.0
        cost_per_day = total_cost / cfg.COST_PER_DAY_DIVISOR

        open_statuses = list(cfg.OPEN_ISSUE_STATUSES)
        open_issues = await self._count(
            f"SELECT COUNT(*) FROM issues WHERE company_id = ? AND status IN ({_placeholders(open_statuses)})",
            (company_id, *open_statuses),
        )
        queued_statuses = list(cfg.QUEUED_SERVICE_STATUSES)
        maintenance_queue = await self._count(
            f"SELECT COUNT(*) FROM services WHERE company_id = ? AND status IN ({_placeholders(queued_statuses)})",
            (company_id, *queued_statuses),
        )
        overdue_reminders = await self._count(
            "SELECT COUNT(*) FROM inspections WHERE company_id = ? AND next_due_date IS NOT NULL "
            "AND next_due_date < ?",
            (company_id, today.isoformat()),
        )
        renewal_cutoff = today + dt.timedelta(days=cfg.LICENSE_RENEWAL_WINDOW_DAYS)
        renewal_count = await self._count(
            "SELECT COUNT(*) FROM drivers WHERE company_id = ? AND license_expiry <= ?",
            (company_id, renewal_cutoff.isoformat()),
        )

        return {
            "total_vehicles": total_vehicles,
            "active_vehicles": active_vehicles,
            "total_drivers": total_drivers,
            "active_drivers": active_drivers,
            "total_trips": total_trips,
            "completed_trips": completed_trips,
            "monthly_trips": monthly_trips,
            "monthly_expenses": monthly_expenses,
            "monthly_fuel_costs": monthly_fuel_costs,
            "vehicle_utilization": vehicle_utilization,
            "recent_issues": recent_issues,
            "upcoming_services": upcoming_services,
            "total_expenses": round(total_expenses, 2),
            "total_cost": round(total_cost, 2),
            "avg_mpg": round(float(avg_mpg), 1),
            "cost_per_mile": round(cost_per_mile, 2),
            "cost_per_day": round(cost_per_day, 2),
            "open_issues": open_issues,
            "maintenance_queue": maintenance_queue,
            "overdue_reminders": overdue_reminders,
            "renewal_count": renewal_count,
            "downtime_days": 0,
            "cost_increase_percent": 0,
        }

    async def get_chart_data(self, company_id: int, today: Optional[dt.date] = None) -> Dict[str, List]:
        """Twelve-month expense and fuel-cost series for the current year."""
        year = str((today or dt.date.today()).year)
        expenses = await self._monthly("expenses", "expense_date", "SUM(amount)", company_id, year)
        fuel = await self._monthly(
            "fuel_fillups", "fillup_date", "SUM(cost)", company_id, year, extra="AND deleted_at IS NULL")
        return {
            "labels": MONTH_LABELS,
            "expenses": [round(float(expenses.get(str(m), 0.0)), 2) for m in range(1, 13)],
            "revenue": [round(float(fuel.get(str(m), 0.0)), 2) for m in range(1, 13)],
        }

    async def _with_vehicles(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        vehicles = await self.store.get_many("vehicles", (r["vehicle_id"] for r in rows))
        return [{**r, "vehicle": vehicle_summary(vehicles.get(r["vehicle_id"]))} for r in rows]
