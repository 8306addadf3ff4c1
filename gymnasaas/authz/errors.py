"""Authorization errors raised by the tenant gate."""

from gymnasaas.errors import AppError


class AuthzError(AppError):
    code = "FORBIDDEN"
    status_code = 403


class Unauthenticated(AuthzError):
    code = "UNAUTHENTICATED"
    status_code = 401


class ProfileNotFound(AuthzError):
    code = "PROFILE_NOT_FOUND"
    status_code = 404


class LoginDisabled(AuthzError):
    code = "LOGIN_DISABLED"
    message = "Tu cuenta no tiene acceso activado. Contacta al administrador."


class TenantMissing(AuthzError):
    code = "TENANT_MISSING"


class Forbidden(AuthzError):
    code = "FORBIDDEN"


class SuperAdminRequired(Forbidden):
    code = "SUPER_ADMIN_REQUIRED"
