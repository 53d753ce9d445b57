"""JWT handling for identities issued by the hosted auth provider.

The provider signs HS256 tokens carrying the external subject id (``sub``) and
the account ``email``. ``create_access_token`` mints the same shape for local
development and tests.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from nova.app.core.settings import get_settings


@dataclass(frozen=True)
class Identity:
    subject_id: str
    email: str | None = None


def create_access_token(subject_id: str, email: str | None = None, expires_minutes: Optional[int] = None) -> str:
    settings = get_settings()
    expire_delta = timedelta(minutes=expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + expire_delta
    payload: Dict[str, Any] = {"sub": str(subject_id), "exp": expire}
    if email:
        payload["email"] = email
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise ValueError("Expired token") from exc
    except jwt.InvalidTokenError as exc:
        raise ValueError("Invalid token") from exc


def identity_from_token(token: str) -> Identity | None:
    """Return the identity carried by ``token`` or None when it cannot be trusted."""
    try:
        payload = decode_access_token(token)
    except ValueError:
        return None
    subject_id = payload.get("sub")
    if not subject_id:
        return None
    return Identity(subject_id=str(subject_id), email=payload.get("email"))
