"""Academies module."""

from gymnasaas.academies.router import public_router, router
from gymnasaas.academies.service import AcademyService, get_academy_service

__all__ = ["router", "public_router", "AcademyService", "get_academy_service"]
