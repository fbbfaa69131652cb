"""Mailer — outbound email behind a one-method protocol.

Invariants:
    - send() either delivers the message or raises EmailDeliveryError
    - LoggingMailer never logs the body (it carries the opaque token)

Design Decisions:
    - smtplib runs in a worker thread (asyncio.to_thread): the event loop is never
      blocked by the SMTP conversation
    - Backend picked from settings at startup; tests inject a recording fake
"""

import asyncio
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage as MIMEMessage
from typing import Protocol

from cashtrackr.core.errors import EmailDeliveryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailMessage:
    recipient: str
    subject: str
    html: str


class Mailer(Protocol):
    async def send(self, message: EmailMessage) -> None: ...


class SmtpMailer:
    """Delivers messages through an SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self._host = host
        self._port = port
        self._sender = sender
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout

    async def send(self, message: EmailMessage) -> None:
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP delivery to {self._host}:{self._port} failed: {e}")
            raise EmailDeliveryError(str(e))

    def _deliver(self, message: EmailMessage) -> None:
        mime = MIMEMessage()
        mime["From"] = self._sender
        mime["To"] = message.recipient
        mime["Subject"] = message.subject
        mime.set_content(message.html, subtype="html")
        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
            if self._use_tls:
                smtp.starttls()
            if self._username:
                smtp.login(self._username, self._password)
            smtp.send_message(mime)


class LoggingMailer:
    """Development mailer: records that a message would have been sent."""

    async def send(self, message: EmailMessage) -> None:
        logger.info(f"Email '{message.subject}' to {message.recipient} (not sent)")


def build_mailer(settings) -> Mailer:
    if settings.mail_backend == "smtp":
        return SmtpMailer(
            settings.smtp_host,
            settings.smtp_port,
            settings.mail_from,
            username=settings.smtp_user,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
        )
    return LoggingMailer()
