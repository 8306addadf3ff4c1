"""Super admin console."""

from gymnasaas.super_admin.router import router
from gymnasaas.super_admin.service import SuperAdminService

__all__ = ["router", "SuperAdminService"]
