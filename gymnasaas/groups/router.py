"""Training group API routes."""

from fastapi import APIRouter, Query, status

from gymnasaas.billing.limits import get_plan_limit_service
from gymnasaas.db.models import Group
from gymnasaas.dependencies import CurrentOwner, CurrentTenant, DbSession
from gymnasaas.groups.schemas import GroupCreate, GroupResponse

router = APIRouter()


@router.get("", response_model=list[GroupResponse])
async def list_groups(
    ctx: CurrentTenant,
    db: DbSession,
    academy_id: str = Query(..., min_length=1),
):
    return (
        db.query(Group)
        .filter(Group.tenant_id == ctx.tenant_id, Group.academy_id == academy_id)
        .order_by(Group.name)
        .all()
    )


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(data: GroupCreate, ctx: CurrentOwner, db: DbSession):
    get_plan_limit_service(db, ctx.tenant_id).assert_within_plan_limits(data.academy_id, "groups")
    group = Group(tenant_id=ctx.tenant_id, **data.model_dump())
    db.add(group)
    db.commit()
    db.refresh(group)
    return group
