"""Parent-link token generation."""

import secrets

from nova.app.core.settings import get_settings


def generate_parent_link_token(nbytes: int | None = None) -> str:
    """Return an unguessable URL-safe capability string.

    Issued once when a student record is created; nothing rotates it.
    """
    settings = get_settings()
    return secrets.token_urlsafe(nbytes or settings.parent_link_token_bytes)
