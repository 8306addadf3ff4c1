"""Academy API routes."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from gymnasaas.academies.schemas import AcademyCreate, AcademyResponse, PublicAcademyResponse
from gymnasaas.academies.service import AcademyService, get_academy_service, list_public_academies
from gymnasaas.dependencies import CurrentOwner, CurrentTenant, DbSession

router = APIRouter()
public_router = APIRouter()


def get_service(db: DbSession, ctx: CurrentTenant) -> AcademyService:
    return get_academy_service(db, ctx)


def get_owner_service(db: DbSession, ctx: CurrentOwner) -> AcademyService:
    return get_academy_service(db, ctx)


@router.get("", response_model=list[AcademyResponse])
async def list_academies(service: Annotated[AcademyService, Depends(get_service)]):
    return service.list_academies()


@router.post("", response_model=AcademyResponse, status_code=status.HTTP_201_CREATED)
async def create_academy(
    data: AcademyCreate,
    service: Annotated[AcademyService, Depends(get_owner_service)],
):
    return service.create_academy(data)


@public_router.get("", response_model=list[PublicAcademyResponse])
async def public_directory(
    db: DbSession,
    q: Optional[str] = Query(None, max_length=100),
    country: Optional[str] = Query(None, max_length=100),
    limit: int = Query(50, ge=1, le=200),
):
    """Public academy directory. No authentication required."""
    return list_public_academies(db, q=q, country=country, limit=limit)
