"""In-memory mail transport."""

import structlog

from domain.entities.mail import MailMessage

logger = structlog.get_logger()


class InMemoryMailer:
    """Mailer that keeps messages in an outbox instead of sending them.

    Used in development when no SMTP server is configured, and in tests.
    """

    def __init__(self) -> None:
        self.outbox: list[MailMessage] = []

    async def send(self, message: MailMessage) -> None:
        logger.info("mail_captured", to=message.to, subject=message.subject)
        self.outbox.append(message)
