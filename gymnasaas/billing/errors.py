"""Billing and plan-limit errors."""

from gymnasaas.errors import AppError


class BillingError(AppError):
    code = "BILLING_ERROR"
    status_code = 400


class AcademyNotFound(BillingError):
    code = "ACADEMY_NOT_FOUND"
    status_code = 404


class PlanLimitReached(BillingError):
    code = "LIMIT_REACHED"
    status_code = 402


class AcademyLimitReached(PlanLimitReached):
    code = "ACADEMY_LIMIT_REACHED"
