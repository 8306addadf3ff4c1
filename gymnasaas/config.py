"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration.

    Every field can be overridden with an environment variable of the same
    name (case-insensitive) or through a local ``.env`` file.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "GymnaSaaS"
    app_url: str = "http://localhost:3000"
    environment: str = "development"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./gymnasaas.db"

    # Session tokens (issued by the external auth provider)
    session_jwt_secret: str = "change-me-in-production"
    session_jwt_algorithm: str = "HS256"
    session_jwt_audience: str = "authenticated"
    # Development only: trust an X-User-Id header when no session is present
    allow_header_auth: bool = False

    # Rate limiting
    rate_limit_enabled: bool = True

    # Stripe
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    stripe_api_base: str = "https://api.stripe.com/v1"

    # Mailgun
    mailgun_api_key: str = ""
    mailgun_domain: str = ""
    mailgun_from_email: str = "GymnaSaaS <no-reply@gymnasaas.com>"
    mailgun_support_email: str = "soporte@gymnasaas.com"
    mailgun_api_base: str = "https://api.eu.mailgun.net/v3"


@lru_cache
def get_settings() -> Settings:
    """Return the cached application settings."""
    return Settings()
