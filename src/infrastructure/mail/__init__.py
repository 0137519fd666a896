"""Mail transports."""

from .mailer import InMemoryMailer
from .smtp_mailer import SMTPMailer

__all__ = ["InMemoryMailer", "SMTPMailer"]
