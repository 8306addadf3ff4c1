"""Athlete service."""

from sqlalchemy.orm import Session

from gymnasaas.athletes.schemas import AthleteCreate
from gymnasaas.billing.limits import get_plan_limit_service
from gymnasaas.db.models import Athlete


class AthleteService:
    """Tenant-scoped athlete operations.

    Args:
        db: Database session.
        tenant_id: Current tenant ID.
    """

    def __init__(self, db: Session, tenant_id: str):
        self.db = db
        self.tenant_id = tenant_id

    def list_athletes(self, academy_id: str) -> list[Athlete]:
        return (
            self.db.query(Athlete)
            .filter(Athlete.tenant_id == self.tenant_id, Athlete.academy_id == academy_id)
            .order_by(Athlete.name)
            .all()
        )

    def create_athlete(self, data: AthleteCreate) -> Athlete:
        """Enroll an athlete if the academy's plan has room.

        Raises:
            AcademyNotFound: If the academy is not in this tenant.
            PlanLimitReached: If the athlete limit has been reached.
        """
        get_plan_limit_service(self.db, self.tenant_id).assert_within_plan_limits(
            data.academy_id, "athletes"
        )
        athlete = Athlete(tenant_id=self.tenant_id, **data.model_dump())
        self.db.add(athlete)
        self.db.commit()
        self.db.refresh(athlete)
        return athlete


def get_athlete_service(db: Session, tenant_id: str) -> AthleteService:
    return AthleteService(db, tenant_id)
