"""Background jobs of the caller's company: list, inspect, follow and cancel."""
from __future__ import annotations

import json

from fastapi import APIRouter, Depends, Query
from sse_starlette.sse import EventSourceResponse

from ..deps.auth import CurrentUser, require_user
from ..deps.providers import get_job_runner, get_job_store
from ..errors import JobNotFoundError
from ..jobs.models import JobRecord
from ..jobs.runner import JobRunner
from ..jobs.store import JobStore
from ..schemas.envelope import ApiResponse

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


async def company_job(
    job_id: str,
    user: CurrentUser = Depends(require_user),
    store: JobStore = Depends(get_job_store),
) -> JobRecord:
    # Another company's job answers exactly like a missing one.
    rec = await store.get_job(job_id)
    if rec is None or rec.company_id != user.company_id:
        raise JobNotFoundError(f"Job '{job_id}' not found")
    return rec


@router.get("")
async def list_jobs(
    limit: int = Query(default=50, ge=1, le=200),
    user: CurrentUser = Depends(require_user),
    store: JobStore = Depends(get_job_store),
) -> ApiResponse:
    records = await store.list_jobs(company_id=user.company_id, limit=limit)
    data = [rec.model_dump() for rec in records]
    return ApiResponse.success(data, company_id=user.company_id, total=len(data))


@router.get("/{job_id}")
async def get_job(rec: JobRecord = Depends(company_job)) -> ApiResponse:
    return ApiResponse.success(rec.model_dump(), company_id=rec.company_id)


@router.get("/{job_id}/events")
async def job_events(
    rec: JobRecord = Depends(company_job),
    runner: JobRunner = Depends(get_job_runner),
) -> EventSourceResponse:
    """Server-sent events for one job until it finishes."""

    async def stream():
        async for event in runner.subscribe_events(rec.job_id):
            yield {"event": event["event"], "data": json.dumps(event)}

    return EventSourceResponse(stream())


@router.post("/{job_id}/cancel")
async def cancel_job(
    rec: JobRecord = Depends(company_job),
    runner: JobRunner = Depends(get_job_runner),
) -> ApiResponse:
    cancelled = await runner.cancel(rec.job_id)
    return ApiResponse.success({"cancelled": cancelled}, company_id=rec.company_id)
