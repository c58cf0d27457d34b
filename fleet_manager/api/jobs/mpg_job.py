"""MPG recompute job executor."""
from __future__ import annotations

import threading
from typing import Any, Callable, Dict, Optional

from .runner import JobCancelled


def execute_recompute_mpg_job(
    params: Dict[str, Any],
    progress_callback: Optional[Callable] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Dict[str, Any]:
    """Recompute fillup MPG for one company from its odometer history."""
    from ...fuel.mpg import recompute_mpg

    if cancel_event is not None and cancel_event.is_set():
        raise JobCancelled("Job cancelled by user")
    result = recompute_mpg(
        params["db_path"],
        company_id=params.get("company_id"),
        vehicle_id=params.get("vehicle_id"),
        progress_callback=progress_callback,
        cancel_event=cancel_event,
    )
    return {**result, "company_id": params.get("company_id")}
