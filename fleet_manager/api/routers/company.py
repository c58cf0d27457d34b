"""Company settings, team member and profile endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..deps.auth import CurrentUser, require_user
from ..deps.providers import get_fleet_store
from ..schemas.company import CompanySettingsPayload, ProfilePayload, TeamMemberCreate
from ..schemas.envelope import ApiResponse
from ..services.company_service import CompanyService

router = APIRouter(prefix="/api", tags=["company"])


def _service(store=Depends(get_fleet_store)) -> CompanyService:
    return CompanyService(store)


@router.get("/company-settings")
async def get_company_settings(
    user: CurrentUser = Depends(require_user),
    svc: CompanyService = Depends(_service),
) -> ApiResponse:
    return ApiResponse.success(await svc.get_settings(user), company_id=user.company_id)


@router.put("/company-settings")
async def update_company_settings(
    payload: CompanySettingsPayload,
    user: CurrentUser = Depends(require_user),
    svc: CompanyService = Depends(_service),
) -> ApiResponse:
    return ApiResponse.success(await svc.update_settings(user, payload), company_id=user.company_id)


@router.get("/team-members")
async def list_team_members(
    user: CurrentUser = Depends(require_user),
    svc: CompanyService = Depends(_service),
) -> ApiResponse:
    data = await svc.list_members(user)
    return ApiResponse.success(data, company_id=user.company_id, total=len(data))


@router.post("/team-members", status_code=201)
async def add_team_member(
    payload: TeamMemberCreate,
    user: CurrentUser = Depends(require_user),
    svc: CompanyService = Depends(_service),
) -> ApiResponse:
    return ApiResponse.success(await svc.add_member(user, payload), company_id=user.company_id)


@router.delete("/team-members/{user_id}")
async def remove_team_member(
    user_id: int,
    user: CurrentUser = Depends(require_user),
    svc: CompanyService = Depends(_service),
) -> ApiResponse:
    return ApiResponse.success(await svc.remove_member(user, user_id), company_id=user.company_id)


@router.get("/profile")
async def get_profile(
    user: CurrentUser = Depends(require_user),
    svc: CompanyService = Depends(_service),
) -> ApiResponse:
    return ApiResponse.success(await svc.get_profile(user), company_id=user.company_id)


@router.put("/profile")
async def update_profile(
    payload: ProfilePayload,
    user: CurrentUser = Depends(require_user),
    svc: CompanyService = Depends(_service),
) -> ApiResponse:
    return ApiResponse.success(await svc.update_profile(user, payload), company_id=user.company_id)
