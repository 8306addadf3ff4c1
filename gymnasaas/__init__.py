"""GymnaSaaS: multi-tenant backend for gymnastics academies."""

__version__ = "0.1.0"
