"""Transactional email over the Mailgun HTTP API."""

import logging
from html import escape
from typing import Optional

import httpx

from gymnasaas.billing.plans import PLAN_DISPLAY_NAMES
from gymnasaas.billing.schemas import ViolationReport
from gymnasaas.config import Settings, get_settings
from gymnasaas.db.models import PlanCode

logger = logging.getLogger(__name__)

RESOURCE_LABELS = {
    "academies": "Academias",
    "athletes": "Atletas",
    "classes": "Clases",
    "groups": "Grupos",
}


class EmailService:
    """Sends emails through Mailgun.

    Args:
        settings: Application settings carrying the Mailgun credentials.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.mailgun_api_key and self.settings.mailgun_domain)

    async def send_email(
        self,
        to: str,
        subject: str,
        html: str,
        text: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> bool:
        """Send one email. Returns False when not configured or on API failure."""
        if not self.is_configured:
            logger.warning("Mailgun not configured, skipping email to %s", to)
            return False

        data = {
            "from": self.settings.mailgun_from_email,
            "to": to,
            "subject": subject,
            "html": html,
        }
        if text:
            data["text"] = text
        if reply_to:
            data["h:Reply-To"] = reply_to

        url = f"{self.settings.mailgun_api_base}/{self.settings.mailgun_domain}/messages"
        try:
            async with httpx.AsyncClient(timeout=10.0) as client:
                resp = await client.post(url, auth=("api", self.settings.mailgun_api_key), data=data)
        except httpx.HTTPError as e:
            logger.warning("Mailgun request failed for %s: %s", to, e)
            return False

        if resp.status_code != 200:
            logger.warning("Mailgun rejected email to %s: %s", to, resp.text)
            return False
        return True

    async def send_plan_violation_notice(
        self,
        to: str,
        name: Optional[str],
        plan_code: PlanCode,
        report: ViolationReport,
    ) -> bool:
        """Tell a tenant owner which resources exceed their plan."""
        plan_name = PLAN_DISPLAY_NAMES.get(plan_code, plan_code.value).upper()
        sections = "".join(
            f"<h3>{RESOURCE_LABELS[v.resource]}</h3>"
            f"<p>Tienes <strong>{v.current_count}</strong>, pero tu plan solo permite "
            f"<strong>{v.limit}</strong>"
            + (f" en {escape(v.academy_name)}" if v.academy_name else "")
            + ".</p>"
            for v in report.violations
        )
        limits_url = f"{self.settings.app_url}/dashboard/plan-limits"
        html = (
            f"<h2>Ajustes necesarios en tu plan</h2>"
            f"<p>Hola {escape(name or 'Usuario')},</p>"
            f"<p>Tu plan actual <strong>{plan_name}</strong> tiene límites que están "
            f"siendo excedidos:</p>{sections}"
            f'<p>Visita tu <a href="{limits_url}">panel de ajustes de plan</a> '
            f"o actualiza tu plan para mantener todos tus recursos.</p>"
            f"<p>Soporte: {self.settings.mailgun_support_email}</p>"
        )
        return await self.send_email(
            to=to,
            subject="Ajustes necesarios en tu plan - GymnaSaaS",
            html=html,
            text=(
                f"Tu plan {plan_name} tiene límites que están siendo excedidos. "
                f"Visita {limits_url} para ajustar los recursos."
            ),
            reply_to=self.settings.mailgun_support_email,
        )


def get_email_service() -> EmailService:
    return EmailService(get_settings())
