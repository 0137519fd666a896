"""Active token record entity."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class AuthToken:
    """An active session or reset token, keyed by its JWT id.

    Deleting the record revokes the token before its natural expiry.
    """

    jti: str
    user_id: int
    purpose: str
    expires_at: datetime
    created_at: datetime = field(default_factory=datetime.utcnow)
