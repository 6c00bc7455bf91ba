"""
Outbound email. In development messages are only logged; elsewhere they go
out over SMTP using the MAIL_* settings.
"""
from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

from flask import current_app

logger = logging.getLogger(__name__)


class MailError(RuntimeError):
    pass


@dataclass(frozen=True)
class OutgoingEmail:
    to: str
    subject: str
    text: str
    html: str | None = None


def password_reset_email(to: str, token: str, *, site_url: str, locale: str = "en") -> OutgoingEmail:
    reset_url = f"{site_url.rstrip('/')}/{locale}/reset-password?token={token}"
    text = (
        "Password Reset Request - National Elections Inquiry Commission\n\n"
        "We received a request to reset the password for your account.\n\n"
        f"Open the link below to choose a new password:\n{reset_url}\n\n"
        "This link will expire in 15 minutes.\n\n"
        "If you didn't request this password reset, please ignore this email.\n"
    )
    html = (
        "<p>We received a request to reset the password for your account.</p>"
        f'<p><a href="{reset_url}">Reset Password</a></p>'
        f"<p>Or paste this link into your browser:<br>{reset_url}</p>"
        "<p><strong>This link will expire in 15 minutes.</strong></p>"
    )
    return OutgoingEmail(to=to, subject="Reset Your Password - NEIC Portal", text=text, html=html)


def send_email(message: OutgoingEmail) -> None:
    cfg = current_app.config
    env = (cfg.get("ENV") or "").strip().lower()
    if env in ("development", "test"):
        logger.info("EMAIL (not sent) to=%s subject=%s\n%s", message.to, message.subject, message.text)
        return

    server = (cfg.get("MAIL_SERVER") or "").strip()
    if not server:
        raise MailError("MAIL_SERVER is not configured.")

    msg = EmailMessage()
    msg["Subject"] = message.subject
    msg["From"] = cfg.get("MAIL_FROM") or "no-reply@localhost"
    msg["To"] = message.to
    msg.set_content(message.text)
    if message.html:
        msg.add_alternative(message.html, subtype="html")

    try:
        with smtplib.SMTP(server, int(cfg.get("MAIL_PORT") or 587), timeout=30) as smtp:
            if cfg.get("MAIL_USE_TLS"):
                smtp.starttls()
            if cfg.get("MAIL_USERNAME"):
                smtp.login(cfg["MAIL_USERNAME"], cfg.get("MAIL_PASSWORD") or "")
            smtp.send_message(msg)
    except (OSError, smtplib.SMTPException) as e:
        raise MailError(f"Failed to send email to {message.to}: {e}") from e
