"""FastAPI dependencies shared by the routers."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from gymnasaas.authz.gate import (
    TenantContext,
    require_coach,
    require_owner,
    require_super_admin,
    require_tenant,
)
from gymnasaas.db.database import get_db

DbSession = Annotated[Session, Depends(get_db)]
CurrentTenant = Annotated[TenantContext, Depends(require_tenant)]
# Staff who manage athletes and classes
CurrentCoach = Annotated[TenantContext, Depends(require_coach)]
CurrentOwner = Annotated[TenantContext, Depends(require_owner)]
SuperAdmin = Annotated[TenantContext, Depends(require_super_admin)]

__all__ = ["get_db", "DbSession", "CurrentTenant", "CurrentCoach", "CurrentOwner", "SuperAdmin"]
