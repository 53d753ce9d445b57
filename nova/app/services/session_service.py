"""Session scheduling for tutors and read-only history for parents."""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from nova.app.core.errors import ValidationError
from nova.app.core.retry import transactional
from nova.app.core.time import ensure_utc
from nova.app.crud.crud_session import session_crud
from nova.app.models.session import Session as SessionModel
from nova.app.schemas.session import SessionCreate, SessionUpdate
from nova.app.services import access_gateway
from nova.app.services.notifications import NotificationSender

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "General"
PARENT_HISTORY_LIMIT = 50


def _validate_times(start_time: datetime, end_time: datetime) -> None:
    if ensure_utc(end_time) <= ensure_utc(start_time):
        raise ValidationError.for_field("end_time", "End time must be after start time")


def create_session(db: Session, tutor_id: int, session_in: SessionCreate) -> SessionModel:
    _validate_times(session_in.start_time, session_in.end_time)

    def operation() -> SessionModel:
        student = access_gateway.get_linked_student(db, tutor_id, session_in.student_id)
        return session_crud.create(
            db,
            tutor_id=tutor_id,
            student_id=student.id,
            subject=session_in.subject or DEFAULT_SUBJECT,
            start_time=ensure_utc(session_in.start_time),
            end_time=ensure_utc(session_in.end_time),
            status=session_in.status,
            notes=session_in.notes,
            homework=session_in.homework,
        )

    session_obj = transactional(db, operation)
    db.refresh(session_obj)
    logger.info("Tutor %s scheduled session %s for student %s", tutor_id, session_obj.id, session_obj.student_id)
    return session_obj


def list_sessions(db: Session, tutor_id: int, student_id: str) -> list[SessionModel]:
    """Sessions of a linked student visible to ``tutor_id``.

    The owning tutor sees the full history; a secondary tutor only sees the
    sessions they booked.
    """
    student = access_gateway.get_linked_student(db, tutor_id, student_id)
    link = student.primary_link
    booked_by = None if link is not None and link.tutor_id == tutor_id else tutor_id
    return session_crud.get_multi_for_student(db, student_id=student.id, tutor_id=booked_by)


def update_session(db: Session, tutor_id: int, session_id: int, session_in: SessionUpdate) -> SessionModel:
    update_data = {field: value for field, value in session_in.model_dump(exclude_unset=True).items() if value is not None}
    for field in ("start_time", "end_time"):
        if field in update_data:
            update_data[field] = ensure_utc(update_data[field])

    def operation() -> SessionModel:
        session_obj = access_gateway.get_owned_session(db, tutor_id, session_id)
        start_time = update_data.get("start_time", session_obj.start_time)
        end_time = update_data.get("end_time", session_obj.end_time)
        _validate_times(start_time, end_time)
        return session_crud.update(db, db_obj=session_obj, update_data=update_data)

    session_obj = transactional(db, operation)
    db.refresh(session_obj)
    return session_obj


def delete_session(db: Session, tutor_id: int, session_id: int) -> None:
    def operation() -> None:
        session_obj = access_gateway.get_owned_session(db, tutor_id, session_id)
        session_crud.delete(db, db_obj=session_obj)

    transactional(db, operation)
    logger.info("Tutor %s deleted session %s", tutor_id, session_id)


def send_session_reminder(db: Session, tutor_id: int, session_id: int, sender: NotificationSender) -> SessionModel:
    session_obj = access_gateway.get_owned_session(db, tutor_id, session_id)
    sender.send_session_reminder(session_obj.id)
    return session_obj


def list_parent_sessions(db: Session, token: str) -> list[SessionModel]:
    student = access_gateway.resolve_parent_token(db, token)
    return session_crud.get_multi_for_student(db, student_id=student.id, limit=PARENT_HISTORY_LIMIT)


def list_parent_account_sessions(db: Session, parent_user_id: str, student_id: str) -> list[SessionModel]:
    student = access_gateway.get_parent_student(db, parent_user_id, student_id)
    return session_crud.get_multi_for_student(db, student_id=student.id, limit=PARENT_HISTORY_LIMIT)
