"""Route classification used by the tenant gate."""

from typing import Optional

from fastapi import Request

# (path prefix, methods) - None means any method
PUBLIC_ENDPOINTS: tuple[tuple[str, Optional[frozenset[str]]], ...] = (
    ("/api/public", None),
    ("/api/billing/webhook", frozenset({"POST"})),
    ("/api/academies/public", frozenset({"GET"})),
)

ACADEMY_CREATION_ENDPOINTS: tuple[tuple[str, frozenset[str]], ...] = (
    ("/api/academies", frozenset({"POST"})),
    ("/api/onboarding", frozenset({"POST"})),
)

# Endpoints that work with or without a tenant (e.g. a fresh signup)
FLEXIBLE_TENANT_ENDPOINTS: tuple[str, ...] = (
    "/api/profile",
    "/api/billing/check-limits",
    "/api/onboarding",
)

ACADEMY_ID_HEADER = "x-academy-id"


def _matches(pathname: str, prefix: str) -> bool:
    return pathname == prefix or pathname.startswith(prefix.rstrip("/") + "/")


def is_public_endpoint(pathname: str, method: str) -> bool:
    method = method.upper()
    for prefix, methods in PUBLIC_ENDPOINTS:
        if _matches(pathname, prefix) and (methods is None or method in methods):
            return True
    return False


def is_academy_creation_endpoint(pathname: str, method: str) -> bool:
    method = method.upper()
    return any(
        pathname.rstrip("/") == prefix and method in methods
        for prefix, methods in ACADEMY_CREATION_ENDPOINTS
    )


def is_flexible_tenant_endpoint(pathname: str) -> bool:
    return any(_matches(pathname, prefix) for prefix in FLEXIBLE_TENANT_ENDPOINTS)


def is_tenant_optional(pathname: str, method: str) -> bool:
    """True when a route may run without a resolved tenant."""
    return (
        is_public_endpoint(pathname, method)
        or is_academy_creation_endpoint(pathname, method)
        or is_flexible_tenant_endpoint(pathname)
    )


def extract_academy_id(request: Request) -> Optional[str]:
    """Academy the request targets: path param, then query string, then header."""
    path_value = request.path_params.get("academy_id")
    if path_value:
        return str(path_value)

    for key in ("academyId", "academy_id"):
        value = request.query_params.get(key)
        if value:
            return value

    return request.headers.get(ACADEMY_ID_HEADER) or None
