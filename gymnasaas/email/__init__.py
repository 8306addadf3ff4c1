"""Email module for sending notifications."""

from gymnasaas.email.service import EmailService, get_email_service

__all__ = ["EmailService", "get_email_service"]
