"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from gymnasaas import __version__
from gymnasaas.academies import public_router as public_academies_router
from gymnasaas.academies import router as academies_router
from gymnasaas.athletes import router as athletes_router
from gymnasaas.authz.errors import AuthzError
from gymnasaas.billing.router import router as billing_router
from gymnasaas.classes import router as classes_router
from gymnasaas.config import get_settings
from gymnasaas.errors import AppError
from gymnasaas.groups import router as groups_router
from gymnasaas.security import RateLimitMiddleware, api_limiter
from gymnasaas.super_admin import router as super_admin_router

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version=__version__)

if settings.rate_limit_enabled:
    app.add_middleware(RateLimitMiddleware, limiter=api_limiter)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, AuthzError):
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.code)
    elif exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(academies_router, prefix="/api/academies", tags=["academies"])
app.include_router(public_academies_router, prefix="/api/public/academies", tags=["public"])
app.include_router(athletes_router, prefix="/api/athletes", tags=["athletes"])
app.include_router(classes_router, prefix="/api/classes", tags=["classes"])
app.include_router(groups_router, prefix="/api/groups", tags=["groups"])
app.include_router(billing_router, prefix="/api/billing", tags=["billing"])
app.include_router(super_admin_router, prefix="/api/super-admin", tags=["super-admin"])


@app.get("/health")
async def health():
    return {"status": "ok"}
