"""
Admin access check.

Sign-in itself is delegated to Google through Streamlit's OIDC support;
this module only decides whether a signed-in email may use the admin pages.
"""

from typing import Iterable, Optional


def parse_admin_emails(raw: Iterable[str] | str) -> set[str]:
    """Normalize a list (or comma-separated string) of admin emails."""
    if isinstance(raw, str):
        raw = raw.split(",")
    return {email.strip().lower() for email in raw if email and email.strip()}


def is_admin_email(email: Optional[str], admin_emails: Iterable[str]) -> bool:
    """True if the email may use the admin dashboard.

    An empty allow-list admits every signed-in user.
    """
    if not email:
        return False
    allowed = parse_admin_emails(admin_emails)
    if not allowed:
        return True
    return email.strip().lower() in allowed
