"""SMTP mail transport."""

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from core.config import settings
from core.exceptions import MailDeliveryError
from domain.entities.mail import MailMessage

logger = logging.getLogger(__name__)


class SMTPMailer:
    """Send mail through an SMTP relay.

    ``smtplib`` is blocking, so delivery runs in a worker thread.
    """

    def __init__(
        self,
        host: str = settings.smtp_host,
        port: int = settings.smtp_port,
        username: str = settings.smtp_username,
        password: str = settings.smtp_password,
        use_tls: bool = settings.smtp_use_tls,
        sender: str = settings.mail_from,
        timeout: float = settings.smtp_timeout_seconds,
    ) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._sender = sender
        self._timeout = timeout

    async def send(self, message: MailMessage) -> None:
        """Deliver a message, raising MailDeliveryError on any SMTP failure."""
        try:
            await asyncio.to_thread(self._send_sync, self._build(message))
        except (smtplib.SMTPException, OSError) as e:
            logger.error("SMTP delivery to %s failed: %s", message.to, e)
            raise MailDeliveryError() from e

    def _build(self, message: MailMessage) -> EmailMessage:
        email = EmailMessage()
        email["From"] = self._sender
        email["To"] = message.to
        email["Subject"] = message.subject
        email.set_content(message.text)
        if message.html:
            email.add_alternative(message.html, subtype="html")
        return email

    def _send_sync(self, email: EmailMessage) -> None:
        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as client:
            if self._use_tls:
                client.starttls()
            if self._username:
                client.login(self._username, self._password)
            client.send_message(email)
