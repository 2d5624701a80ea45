"""SMTP mail sender."""

import logging
import smtplib
import ssl
from email.message import EmailMessage

from fastapi import Request
from fastapi.concurrency import run_in_threadpool

from rotten.config import Settings

logger = logging.getLogger(__name__)


class Mailer:
    """Plain-text SMTP sender. Transport and header errors propagate to the caller."""

    def __init__(
        self,
        host: str,
        port: int,
        from_email: str,
        username: str | None = None,
        password: str | None = None,
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.from_email = from_email
        self.username = username
        self.password = password
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "Mailer":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            from_email=settings.from_email,
            username=settings.smtp_username,
            password=settings.smtp_password,
            timeout=settings.smtp_timeout,
        )

    def build_message(self, recipient: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.from_email
        msg["To"] = recipient
        msg["Subject"] = subject or "Notification"
        msg.set_content(body or "")
        return msg

    def _send_sync(self, msg: EmailMessage) -> None:
        context = ssl.create_default_context()
        # Port 465 is implicit TLS, anything else upgrades with STARTTLS when offered
        if self.port == 465:
            smtp = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout, context=context)
        else:
            smtp = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        with smtp:
            if self.port != 465:
                smtp.ehlo()
                # Plain relays without STARTTLS are used as-is
                if smtp.has_extn("starttls"):
                    smtp.starttls(context=context)
                    smtp.ehlo()
            if self.username and self.password:
                smtp.login(self.username, self.password)
            smtp.send_message(msg)

    async def send(self, recipient: str, subject: str, body: str) -> None:
        msg = self.build_message(recipient, subject, body)
        await run_in_threadpool(self._send_sync, msg)
        logger.info("mail sent to=%s subject=%r", recipient, msg["Subject"])


def get_mailer(request: Request) -> Mailer:
    """Dependency returning the app's mailer."""
    return request.app.state.mailer
