"""Athletes module."""

from gymnasaas.athletes.router import router
from gymnasaas.athletes.service import AthleteService, get_athlete_service

__all__ = ["router", "AthleteService", "get_athlete_service"]
