"""Miles-per-gallon from consecutive odometer readings.

A fillup's MPG is the distance driven since the previous fillup of the same
vehicle divided by the gallons bought at this fillup:

    mpg = (odometer - previous_odometer) / gallons

No value is produced when either reading is missing, when no fuel was
bought, or when the odometer did not advance; callers leave the stored MPG
untouched in that case.
"""
from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

import fleet_manager.config as cfg

logger = logging.getLogger(__name__)


def _as_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def compute_mpg(
    previous_odometer: Any, odometer: Any, gallons: Any
) -> Optional[float]:
    """Return the rounded MPG for one fillup, or ``None`` if undefined."""
    prev = _as_float(previous_odometer)
    cur = _as_float(odometer)
    fuel = _as_float(gallons) or 0.0
    if prev is None or cur is None or fuel <= 0:
        return None
    distance = cur - prev
    if distance <= 0:
        return None
    return round(distance / fuel, cfg.MPG_DECIMALS)


def cost_per_gallon(cost: Any, gallons: Any) -> Optional[float]:
    """Unit price of a fillup, or ``None`` when no fuel was bought."""
    fuel = _as_float(gallons) or 0.0
    if fuel <= 0:
        return None
    return round((_as_float(cost) or 0.0) / fuel, cfg.COST_PER_GALLON_DECIMALS)


def recompute_series(fillups: Iterable[Mapping[str, Any]]) -> List[Tuple[int, float]]:
    """Walk one vehicle's fillups in date order and return ``(id, mpg)`` updates.

    The previous reading always moves to the current row, even when the
    current reading is missing, so a gap in readings breaks the chain.
    Rows with no computable MPG are not included.
    """
    updates: List[Tuple[int, float]] = []
    prev_odo = None
    for fillup in fillups:
        odo = fillup.get("odometer_reading")
        mpg = compute_mpg(prev_odo, odo, fillup.get("gallons"))
        if mpg is not None:
            updates.append((fillup["id"], mpg))
        prev_odo = odo
    return updates


def recompute_mpg(
    db_path: str | Path,
    company_id: Optional[int] = None,
    vehicle_id: Optional[int] = None,
    progress_callback: Optional[Callable[[float, str], None]] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Dict[str, int]:
    """Recompute stored MPG for every vehicle, optionally for one company or vehicle.

    Synchronous; runs inside a job thread or the ``run_compute_mpg.py`` CLI.

    Returns
    -------
    dict
        ``{"processed": <fillups updated>, "vehicles": <vehicles scanned>}``
    """
    from ..api.jobs.runner import JobCancelled

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    processed = 0
    try:
        sql = "SELECT DISTINCT vehicle_id FROM fuel_fillups WHERE deleted_at IS NULL"
        params: tuple = ()
        if company_id is not None:
            sql += " AND company_id = ?"
            params += (company_id,)
        if vehicle_id is not None:
            sql += " AND vehicle_id = ?"
            params += (vehicle_id,)
        vehicle_ids = [r[0] for r in conn.execute(sql + " ORDER BY vehicle_id", params)]
        total = len(vehicle_ids)

        for n, vid in enumerate(vehicle_ids, start=1):
            if cancel_event is not None and cancel_event.is_set():
                raise JobCancelled(f"MPG recompute cancelled after {n - 1} vehicles")
            rows = conn.execute(
                "SELECT id, odometer_reading, gallons FROM fuel_fillups "
                "WHERE vehicle_id = ? AND deleted_at IS NULL ORDER BY fillup_date, id",
                (vid,),
            ).fetchall()
            updates = recompute_series(dict(r) for r in rows)
            if updates:
                conn.executemany(
                    "UPDATE fuel_fillups SET mpg = ? WHERE id = ?",
                    [(mpg, fid) for fid, mpg in updates],
                )
                conn.commit()
                processed += len(updates)
            if progress_callback:
                progress_callback(n / total, f"Vehicle {vid}: {len(updates)} fillups updated")
    finally:
        conn.close()

    logger.info("MPG updated for %d fillups across %d vehicles", processed, len(vehicle_ids),
                extra={"company_id": company_id})
    return {"processed": processed, "vehicles": len(vehicle_ids)}
