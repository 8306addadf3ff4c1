"""Training classes module."""

from gymnasaas.classes.router import router

__all__ = ["router"]
