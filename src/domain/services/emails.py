"""Email bodies for the registration and password reset flows."""

from html import escape
from urllib.parse import urlencode

from domain.entities.mail import MailMessage


def registration_confirmation(
    to: str, first_name: str, base_url: str, token: str, expires_minutes: int
) -> MailMessage:
    """Build the email that carries the registration confirmation link."""
    link = f"{base_url.rstrip('/')}/register/confirm?{urlencode({'tkey': token})}"
    text = (
        f"Hello {first_name},\n\n"
        f"Confirm your registration by opening the link below:\n{link}\n\n"
        f"The link expires in {expires_minutes} minutes."
    )
    # first_name is caller-supplied and unauthenticated
    safe_link = escape(link)
    html = (
        f"<p>Hello {escape(first_name)},</p>"
        f'<p>Confirm your registration: <a href="{safe_link}">{safe_link}</a></p>'
        f"<p>The link expires in {expires_minutes} minutes.</p>"
    )
    return MailMessage(to=to, subject="Confirm your registration", text=text, html=html)


def password_reset(
    to: str, first_name: str, reset_url: str, token: str, expires_minutes: int
) -> MailMessage:
    """Build the email that carries the password reset token.

    ``reset_url`` is the client page that collects the new password and
    posts it to ``/changepassword`` with the token as bearer credential.
    The raw token is included as well for clients without such a page.
    """
    separator = "&" if "?" in reset_url else "?"
    link = f"{reset_url}{separator}{urlencode({'token': token})}"
    text = (
        f"Hello {first_name},\n\n"
        "A password change was requested for your account. "
        f"Use the link below to set a new password:\n{link}\n\n"
        f"Reset token: {token}\n\n"
        f"The link expires in {expires_minutes} minutes. "
        "If you did not request this, ignore this email."
    )
    return MailMessage(to=to, subject="Password reset", text=text)
