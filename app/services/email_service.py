# app/services/email_service.py
"""
Servicio de envío de emails por SMTP con plantillas Jinja2.

Plantillas en app/templates/emails/. Un fallo de envío se registra en el log
y se devuelve como False; nunca interrumpe la petición que lo origina.
"""
import logging
import re
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from pathlib import Path
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.core.config import settings

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent.parent / "templates" / "emails"

FEEDBACK_TYPE_LABELS = {
    "bug": "Reporte de error",
    "feature": "Sugerencia de funcionalidad",
    "question": "Pregunta",
    "other": "Otro",
}


class EmailService:
    """Envío SMTP con STARTTLS. Sin credenciales sólo registra el email (modo prueba)."""

    def __init__(self):
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["feedback_type"] = lambda value: FEEDBACK_TYPE_LABELS.get(
            getattr(value, "value", value), value
        )

    def render(self, template_name: str, **context: Any) -> str:
        context.setdefault("year", datetime.now().year)
        return self.env.get_template(template_name).render(**context)

    def _is_configured(self) -> bool:
        return bool(settings.smtp_user and settings.smtp_password)

    def send_email(self, to_email: str, subject: str, body_html: str) -> bool:
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = formataddr((settings.smtp_from_name, settings.smtp_from_email))
        message["To"] = to_email
        message.attach(MIMEText(re.sub(r"<[^>]*>", "", body_html), "plain", "utf-8"))
        message.attach(MIMEText(body_html, "html", "utf-8"))

        if not self._is_configured():
            logger.info("[MODO PRUEBA] Email a %s - %s", to_email, subject)
            return False

        try:
            with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=settings.smtp_timeout) as server:
                if settings.smtp_use_tls:
                    server.starttls()
                server.login(settings.smtp_user, settings.smtp_password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Error enviando email a %s: %s", to_email, e)
            return False

        logger.info("Email enviado a %s - %s", to_email, subject)
        return True


_email_service: EmailService | None = None


def get_email_service() -> EmailService:
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service


def send_password_reset_email(email: str, reset_url: str, user_name: str) -> bool:
    service = get_email_service()
    html = service.render(
        "password_reset.html",
        user_name=user_name,
        reset_url=reset_url,
        minutes_valid=settings.password_reset_expire_minutes,
    )
    return service.send_email(email, "Restablecimiento de Contraseña - Sociedad Roncesvalles", html)


def send_feedback_email(feedback: Dict[str, Any]) -> bool:
    if not settings.feedback_admin_email:
        logger.info("FEEDBACK_ADMIN_EMAIL no configurado; no se notifica el feedback")
        return False
    service = get_email_service()
    html = service.render("feedback.html", feedback=feedback)
    subject = f"Nuevo feedback: {FEEDBACK_TYPE_LABELS.get(feedback['type'], feedback['type'])}"
    return service.send_email(settings.feedback_admin_email, subject, html)
