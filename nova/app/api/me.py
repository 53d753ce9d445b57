"""Identity bootstrap endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from nova.app.core.security import Identity
from nova.app.db.session import get_db
from nova.app.dependencies.auth import get_scope, require_identity
from nova.app.schemas.tutor import ScopeRead, TutorRead
from nova.app.services.access_gateway import Scope
from nova.app.services.account_service import ensure_tutor

router = APIRouter(prefix="/me", tags=["me"])


@router.post("/ensure", response_model=TutorRead)
def ensure_tutor_record(db: Session = Depends(get_db), identity: Identity = Depends(require_identity)):
    return ensure_tutor(db, identity)


@router.get("", response_model=ScopeRead)
async def read_scope(scope: Scope = Depends(get_scope)):
    return ScopeRead(kind=scope.kind.value, tutor_id=scope.tutor_id, student_id=scope.student_id, read_only=scope.read_only)
