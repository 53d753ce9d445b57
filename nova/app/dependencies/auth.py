"""Request dependencies that turn headers into an identity and a scope."""

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from nova.app.core.errors import Unauthenticated
from nova.app.core.security import Identity, identity_from_token
from nova.app.db.session import get_db
from nova.app.services.access_gateway import (
    Scope,
    require_parent_account,
    require_student,
    require_tutor,
    resolve_scope,
)


def get_identity(authorization: str | None = Header(default=None)) -> Optional[Identity]:
    # Expect Authorization: Bearer <token>; anything unusable means no identity
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return identity_from_token(authorization.split(" ", 1)[1])


def require_identity(identity: Optional[Identity] = Depends(get_identity)) -> Identity:
    if identity is None:
        raise Unauthenticated("Authentication required")
    return identity


def get_scope(
    db: Session = Depends(get_db),
    identity: Optional[Identity] = Depends(get_identity),
    x_parent_token: str | None = Header(default=None),
) -> Scope:
    return resolve_scope(db, identity, x_parent_token)


def get_current_tutor_id(scope: Scope = Depends(get_scope)) -> int:
    return require_tutor(scope)


def get_current_student_id(scope: Scope = Depends(get_scope)) -> str:
    return require_student(scope)


def get_current_parent_user_id(scope: Scope = Depends(get_scope)) -> str:
    return require_parent_account(scope)
