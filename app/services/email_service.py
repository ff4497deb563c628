"""
app/services/email_service.py

Purpose: Outgoing mail over SMTP

- Password reset OTP emails
- Blocking smtplib calls run in a worker thread
"""

import asyncio
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class EmailService:
    """Sends plain-text and HTML mail through the configured SMTP server."""

    def __init__(self):
        self.host = settings.EMAIL_HOST
        self.port = settings.EMAIL_PORT
        self.username = settings.EMAIL_USER
        self.password = settings.EMAIL_PASS
        self.sender = settings.EMAIL_FROM

    def _deliver(self, msg: MIMEMultipart) -> None:
        context = ssl.create_default_context()
        if self.port == 465:
            server = smtplib.SMTP_SSL(self.host, self.port, context=context, timeout=10)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=10)
            server.starttls(context=context)

        try:
            if self.username and self.password:
                server.login(self.username, self.password)
            server.send_message(msg)
        finally:
            server.quit()

    async def send_email(self, to: str, subject: str, text: str, html: Optional[str] = None) -> bool:
        """
        Sends an email.

        Returns:
            True if the SMTP server accepted the message
        """
        if not self.host:
            logger.error("EMAIL_HOST not configured, cannot send email")
            return False

        msg = MIMEMultipart("alternative")
        msg["From"] = self.sender
        msg["To"] = to
        msg["Subject"] = subject
        msg.attach(MIMEText(text, "plain"))
        if html:
            msg.attach(MIMEText(html, "html"))

        try:
            await asyncio.to_thread(self._deliver, msg)
            logger.info(f"📧 Email sent: {subject}", extra={"resource": "email"})
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to}: {e}", exc_info=True)
            return False

    async def send_otp_email(self, to: str, otp: str) -> bool:
        minutes = settings.OTP_EXPIRES_MIN
        text = (
            f"Your password reset code is {otp}. "
            f"It expires in {minutes} minutes. "
            "If you did not request a reset, ignore this email."
        )
        html = (
            "<p>Your password reset code is:</p>"
            f"<h2 style=\"letter-spacing:4px\">{otp}</h2>"
            f"<p>It expires in {minutes} minutes. "
            "If you did not request a reset, ignore this email.</p>"
        )
        return await self.send_email(to, "EV Shop password reset code", text, html)


# Global service instance
_email_service: Optional[EmailService] = None


def get_email_service() -> EmailService:
    """Get or create email service instance."""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
