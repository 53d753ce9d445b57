"""Session endpoints for tutors."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from nova.app.db.session import get_db
from nova.app.dependencies.auth import get_current_tutor_id
from nova.app.schemas.session import SessionCreate, SessionRead, SessionUpdate
from nova.app.services import session_service
from nova.app.services.notifications import NotificationSender, get_notification_sender

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionRead, status_code=status.HTTP_201_CREATED)
def create_session(session_in: SessionCreate, db: Session = Depends(get_db), tutor_id: int = Depends(get_current_tutor_id)):
    return session_service.create_session(db, tutor_id, session_in)


@router.get("", response_model=list[SessionRead])
async def list_sessions(student_id: str, db: Session = Depends(get_db), tutor_id: int = Depends(get_current_tutor_id)):
    return session_service.list_sessions(db, tutor_id, student_id)


@router.patch("/{session_id}", response_model=SessionRead)
def update_session(
    session_id: int,
    session_in: SessionUpdate,
    db: Session = Depends(get_db),
    tutor_id: int = Depends(get_current_tutor_id),
):
    return session_service.update_session(db, tutor_id, session_id, session_in)


@router.delete("/{session_id}")
def delete_session(session_id: int, db: Session = Depends(get_db), tutor_id: int = Depends(get_current_tutor_id)):
    session_service.delete_session(db, tutor_id, session_id)
    return {"status": "deleted", "id": session_id}


@router.post("/{session_id}/reminder", status_code=status.HTTP_202_ACCEPTED)
def send_reminder(
    session_id: int,
    db: Session = Depends(get_db),
    tutor_id: int = Depends(get_current_tutor_id),
    sender: NotificationSender = Depends(get_notification_sender),
):
    session_service.send_session_reminder(db, tutor_id, session_id, sender)
    return {"status": "queued", "id": session_id}
