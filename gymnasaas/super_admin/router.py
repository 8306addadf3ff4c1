"""Super admin API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from gymnasaas.academies.schemas import AcademyResponse
from gymnasaas.dependencies import DbSession, SuperAdmin
from gymnasaas.super_admin.schemas import (
    AcademyDetailResponse,
    OverviewResponse,
    ProfileAccessResponse,
)
from gymnasaas.super_admin.service import SuperAdminService

router = APIRouter()


def get_service(db: DbSession, ctx: SuperAdmin) -> SuperAdminService:
    return SuperAdminService(db, ctx.user_id)


@router.get("/overview", response_model=OverviewResponse)
async def overview(service: Annotated[SuperAdminService, Depends(get_service)]):
    return service.get_overview()


@router.get("/academies/{academy_id}", response_model=AcademyDetailResponse)
async def academy_detail(
    academy_id: str,
    service: Annotated[SuperAdminService, Depends(get_service)],
):
    detail = service.get_academy_detail(academy_id)
    if detail is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Academy not found")
    return detail


@router.post("/academies/{academy_id}/suspend", response_model=AcademyResponse)
async def suspend_academy(
    academy_id: str,
    service: Annotated[SuperAdminService, Depends(get_service)],
):
    academy = service.set_suspended(academy_id, True)
    if academy is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Academy not found")
    return academy


@router.post("/academies/{academy_id}/unsuspend", response_model=AcademyResponse)
async def unsuspend_academy(
    academy_id: str,
    service: Annotated[SuperAdminService, Depends(get_service)],
):
    academy = service.set_suspended(academy_id, False)
    if academy is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Academy not found")
    return academy


@router.post("/users/{profile_id}/activate-access", response_model=ProfileAccessResponse)
async def activate_access(
    profile_id: str,
    service: Annotated[SuperAdminService, Depends(get_service)],
):
    profile = service.activate_access(profile_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile
