"""Delivery of email one-time codes."""

import asyncio
import logging
import smtplib
from email.mime.text import MIMEText
from typing import Protocol

from kinchart.config import settings

logger = logging.getLogger(__name__)


class OtpMailer(Protocol):
    async def send_code(self, email: str, code: str) -> None: ...


class LoggingMailer:
    """Development mailer: writes the code to the log instead of sending it."""

    async def send_code(self, email: str, code: str) -> None:
        logger.warning("SMTP not configured; sign-in code for %s is %s", email, code)


class SmtpMailer:
    """Sends codes through the configured SMTP server."""

    def __init__(self, host: str, port: int, user: str, password: str, sender: str):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.sender = sender

    def _send(self, email: str, code: str) -> None:
        msg = MIMEText(
            f"Your KinChart sign-in code is {code}.\n\n"
            f"It expires in {settings.otp_ttl_minutes} minutes. "
            "If you did not request it, you can ignore this email.",
            "plain",
        )
        msg["Subject"] = f"Your sign-in code: {code}"
        msg["From"] = self.sender
        msg["To"] = email

        with smtplib.SMTP(self.host, self.port, timeout=15) as server:
            server.starttls()
            if self.user:
                server.login(self.user, self.password)
            server.sendmail(self.sender, [email], msg.as_string())

    async def send_code(self, email: str, code: str) -> None:
        await asyncio.to_thread(self._send, email, code)
        logger.info("Sign-in code sent to %s", email)


def get_mailer() -> OtpMailer:
    """FastAPI dependency returning the configured mailer."""
    if settings.smtp_host:
        return SmtpMailer(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_password,
            sender=settings.smtp_from,
        )
    return LoggingMailer()
