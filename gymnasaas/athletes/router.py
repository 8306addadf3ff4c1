"""Athlete API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from gymnasaas.athletes.schemas import AthleteCreate, AthleteResponse
from gymnasaas.athletes.service import AthleteService, get_athlete_service
from gymnasaas.dependencies import CurrentCoach, CurrentTenant, DbSession

router = APIRouter()


def get_service(db: DbSession, ctx: CurrentTenant) -> AthleteService:
    return get_athlete_service(db, ctx.tenant_id)


def get_staff_service(db: DbSession, ctx: CurrentCoach) -> AthleteService:
    return get_athlete_service(db, ctx.tenant_id)


@router.get("", response_model=list[AthleteResponse])
async def list_athletes(
    service: Annotated[AthleteService, Depends(get_service)],
    academy_id: str = Query(..., min_length=1),
):
    return service.list_athletes(academy_id)


@router.post("", response_model=AthleteResponse, status_code=status.HTTP_201_CREATED)
async def create_athlete(
    data: AthleteCreate,
    service: Annotated[AthleteService, Depends(get_staff_service)],
):
    return service.create_athlete(data)
