"""Database module."""

from gymnasaas.db.database import SessionLocal, engine, get_db, init_db
from gymnasaas.db.models import (
    Academy,
    Athlete,
    AuditLog,
    Base,
    Group,
    Plan,
    Profile,
    Subscription,
    Tenant,
    TrainingClass,
)

__all__ = [
    "SessionLocal",
    "engine",
    "get_db",
    "init_db",
    "Base",
    "Tenant",
    "Profile",
    "Academy",
    "Plan",
    "Subscription",
    "Athlete",
    "TrainingClass",
    "Group",
    "AuditLog",
]
