"""Training class API routes."""

from fastapi import APIRouter, Query, status

from gymnasaas.billing.limits import get_plan_limit_service
from gymnasaas.classes.schemas import ClassCreate, ClassResponse
from gymnasaas.db.models import TrainingClass
from gymnasaas.dependencies import CurrentCoach, CurrentTenant, DbSession

router = APIRouter()


@router.get("", response_model=list[ClassResponse])
async def list_classes(
    ctx: CurrentTenant,
    db: DbSession,
    academy_id: str = Query(..., min_length=1),
):
    return (
        db.query(TrainingClass)
        .filter(TrainingClass.tenant_id == ctx.tenant_id, TrainingClass.academy_id == academy_id)
        .order_by(TrainingClass.name)
        .all()
    )


@router.post("", response_model=ClassResponse, status_code=status.HTTP_201_CREATED)
async def create_class(data: ClassCreate, ctx: CurrentCoach, db: DbSession):
    get_plan_limit_service(db, ctx.tenant_id).assert_within_plan_limits(data.academy_id, "classes")
    training_class = TrainingClass(tenant_id=ctx.tenant_id, **data.model_dump())
    db.add(training_class)
    db.commit()
    db.refresh(training_class)
    return training_class
