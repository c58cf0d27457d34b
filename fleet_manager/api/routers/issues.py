"""Issue and expense endpoints."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..cache.invalidation import invalidate_on_fleet_write
from ..cache.manager import CacheManager
from ..deps.auth import CurrentUser, require_user
from ..deps.providers import get_cache, get_fleet_store
from ..schemas.envelope import ApiResponse
from ..schemas.issues import ExpensePayload, IssuePayload
from ..services.issue_service import ExpenseService, IssueService

router = APIRouter(prefix="/api", tags=["issues"])


def _issues(store=Depends(get_fleet_store)) -> IssueService:
    return IssueService(store)


def _expenses(store=Depends(get_fleet_store)) -> ExpenseService:
    return ExpenseService(store)


# ── Issues ───────────────────────────────────────────────────────────


@router.get("/issues")
async def list_issues(
    vehicle_id: Optional[int] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: CurrentUser = Depends(require_user),
    svc: IssueService = Depends(_issues),
) -> ApiResponse:
    filters = {"vehicle_id": vehicle_id, "status": status, "priority": priority}
    data = await svc.list(user, filters, limit=limit, offset=offset)
    return ApiResponse.success(data, company_id=user.company_id, total=len(data))


@router.post("/issues", status_code=201)
async def create_issue(
    payload: IssuePayload,
    user: CurrentUser = Depends(require_user),
    svc: IssueService = Depends(_issues),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.create(user, payload)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)


@router.get("/issues/{issue_id}")
async def get_issue(
    issue_id: int,
    user: CurrentUser = Depends(require_user),
    svc: IssueService = Depends(_issues),
) -> ApiResponse:
    return ApiResponse.success(await svc.show(user, issue_id), company_id=user.company_id)


@router.put("/issues/{issue_id}")
async def update_issue(
    issue_id: int,
    payload: IssuePayload,
    user: CurrentUser = Depends(require_user),
    svc: IssueService = Depends(_issues),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.update(user, issue_id, payload)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)


@router.delete("/issues/{issue_id}")
async def delete_issue(
    issue_id: int,
    user: CurrentUser = Depends(require_user),
    svc: IssueService = Depends(_issues),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.delete(user, issue_id)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)


# ── Expenses ─────────────────────────────────────────────────────────


@router.get("/expenses")
async def list_expenses(
    vehicle_id: Optional[int] = None,
    category: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: CurrentUser = Depends(require_user),
    svc: ExpenseService = Depends(_expenses),
) -> ApiResponse:
    filters = {"vehicle_id": vehicle_id, "category": category}
    data = await svc.list(user, filters, limit=limit, offset=offset)
    return ApiResponse.success(data, company_id=user.company_id, total=len(data))


@router.post("/expenses", status_code=201)
async def create_expense(
    payload: ExpensePayload,
    user: CurrentUser = Depends(require_user),
    svc: ExpenseService = Depends(_expenses),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.create(user, payload)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)


@router.get("/expenses/{expense_id}")
async def get_expense(
    expense_id: int,
    user: CurrentUser = Depends(require_user),
    svc: ExpenseService = Depends(_expenses),
) -> ApiResponse:
    return ApiResponse.success(await svc.show(user, expense_id), company_id=user.company_id)


@router.put("/expenses/{expense_id}")
async def update_expense(
    expense_id: int,
    payload: ExpensePayload,
    user: CurrentUser = Depends(require_user),
    svc: ExpenseService = Depends(_expenses),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.update(user, expense_id, payload)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)


@router.delete("/expenses/{expense_id}")
async def delete_expense(
    expense_id: int,
    user: CurrentUser = Depends(require_user),
    svc: ExpenseService = Depends(_expenses),
    cache: CacheManager = Depends(get_cache),
) -> ApiResponse:
    data = await svc.delete(user, expense_id)
    invalidate_on_fleet_write(cache, user.company_id)
    return ApiResponse.success(data, company_id=user.company_id)
