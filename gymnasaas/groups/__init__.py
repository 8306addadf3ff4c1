"""Training groups module."""

from gymnasaas.groups.router import router

__all__ = ["router"]
