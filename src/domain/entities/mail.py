"""Outgoing mail value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MailMessage:
    """An outgoing plain-text email with an optional HTML part."""

    to: str
    subject: str
    text: str
    html: str | None = None
