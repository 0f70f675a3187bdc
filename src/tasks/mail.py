"""Celery tasks for outgoing email."""

import logging
import smtplib
from email.message import EmailMessage

from src.celery_app import app as celery_app
from src.config import get_settings

logger = logging.getLogger(__name__)


def build_reset_email(sender: str, recipient: str, token: str, frontend_url: str) -> EmailMessage:
    """Build the password reset message carrying the reset link."""
    message = EmailMessage()
    message["From"] = sender
    message["To"] = recipient
    message["Subject"] = "Reset Password"
    message.set_content(
        f"Click this link to reset your password: {frontend_url.rstrip('/')}/reset-password/{token}"
    )
    return message


@celery_app.task(bind=True, max_retries=3)
def send_password_reset_email(self, email: str, token: str) -> dict:
    """Send the password reset link over SMTP.

    Args:
        email: Recipient address
        token: Password reset token to embed in the link

    Returns:
        dict with delivery status
    """
    settings = get_settings()
    if not settings.smtp_user or not settings.smtp_password:
        logger.warning("SMTP credentials not configured, reset email not sent")
        return {"success": False, "error": "SMTP not configured"}

    message = build_reset_email(settings.smtp_user, email, token, settings.frontend_url)
    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=30) as smtp:
            smtp.starttls()
            smtp.login(settings.smtp_user, settings.smtp_password)
            smtp.send_message(message)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Error sending reset email to {email}: {e}")
        raise self.retry(exc=e, countdown=60) from e

    logger.info(f"Reset email sent to {email}")
    return {"success": True, "email": email}
