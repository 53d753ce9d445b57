"""Tutor-student links, connection requests and parent accounts.

Existence checks here are early exits with friendly messages; the unique
constraints on each table are what actually prevents duplicate rows, and
``transactional`` maps their violations to ``Conflict``.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from nova.app.core.errors import Conflict, NotFound, ValidationError
from nova.app.core.retry import transactional
from nova.app.models.connection import (
    CONNECTION_ACCEPTED,
    CONNECTION_DECLINED,
    CONNECTION_PENDING,
    StudentTutorConnection,
)
from nova.app.models.parent import Parent
from nova.app.models.student import Student
from nova.app.models.tutor import Tutor
from nova.app.models.tutor_student import TutorStudent

logger = logging.getLogger(__name__)

CONNECTION_STATUSES = (CONNECTION_PENDING, CONNECTION_ACCEPTED, CONNECTION_DECLINED)
LINK_EXISTS_MESSAGE = "Tutor-student relationship already exists"
CONNECTION_EXISTS_MESSAGE = "Connection request already exists for this tutor and subject"


def _get_tutor(db: Session, tutor_id: int) -> Tutor:
    tutor = db.query(Tutor).filter(Tutor.id == tutor_id).first()
    if not tutor:
        raise NotFound("Tutor not found")
    return tutor


def _get_student(db: Session, student_id: str) -> Student:
    student = db.query(Student).filter(Student.id == student_id).first()
    if not student:
        raise NotFound("Student not found")
    return student


def find_tutor_student_link(db: Session, tutor_id: int, student_id: str) -> Optional[TutorStudent]:
    return (
        db.query(TutorStudent)
        .filter(TutorStudent.tutor_id == tutor_id, TutorStudent.student_id == student_id)
        .first()
    )


def create_tutor_student_link(
    db: Session,
    tutor_id: int,
    student_id: str,
    subject: str,
    notes: Optional[str] = None,
) -> TutorStudent:
    # Uniqueness is per (tutor, student): a second subject for the same pair is a conflict
    def operation() -> TutorStudent:
        _get_tutor(db, tutor_id)
        _get_student(db, student_id)
        if find_tutor_student_link(db, tutor_id, student_id):
            raise Conflict(LINK_EXISTS_MESSAGE)
        link = TutorStudent(tutor_id=tutor_id, student_id=student_id, subject=subject, notes=notes)
        db.add(link)
        db.flush()
        return link

    link = transactional(db, operation, conflict_message=LINK_EXISTS_MESSAGE)
    db.refresh(link)
    # Populate both sides before the session is handed back to the caller
    _ = link.tutor, link.student
    logger.info("Linked tutor %s to student %s", tutor_id, student_id)
    return link


def list_tutor_students(db: Session, tutor_id: int) -> list[TutorStudent]:
    return (
        db.query(TutorStudent)
        .options(joinedload(TutorStudent.student), joinedload(TutorStudent.tutor))
        .filter(TutorStudent.tutor_id == tutor_id)
        .order_by(TutorStudent.start_date.desc(), TutorStudent.id.desc())
        .all()
    )


def _validate_status(status: Optional[str]) -> None:
    if status is not None and status not in CONNECTION_STATUSES:
        raise ValidationError.for_field("status", f"Status must be one of: {', '.join(CONNECTION_STATUSES)}")


def create_connection_request(
    db: Session,
    student_id: str,
    tutor_id: int,
    subject: str,
    message: Optional[str] = None,
) -> StudentTutorConnection:
    def operation() -> StudentTutorConnection:
        _get_student(db, student_id)
        _get_tutor(db, tutor_id)
        existing = (
            db.query(StudentTutorConnection)
            .filter(
                StudentTutorConnection.student_id == student_id,
                StudentTutorConnection.tutor_id == tutor_id,
                StudentTutorConnection.subject == subject,
            )
            .first()
        )
        if existing:
            raise Conflict(CONNECTION_EXISTS_MESSAGE)
        connection = StudentTutorConnection(
            student_id=student_id,
            tutor_id=tutor_id,
            subject=subject,
            request_message=message or None,
            status=CONNECTION_PENDING,
        )
        db.add(connection)
        db.flush()
        return connection

    connection = transactional(db, operation, conflict_message=CONNECTION_EXISTS_MESSAGE)
    db.refresh(connection)
    logger.info("Student %s requested tutor %s for %s", student_id, tutor_id, subject)
    return connection


def list_connections(db: Session, student_id: str, status: Optional[str] = None) -> list[StudentTutorConnection]:
    _validate_status(status)
    query = db.query(StudentTutorConnection).filter(StudentTutorConnection.student_id == student_id)
    if status:
        query = query.filter(StudentTutorConnection.status == status)
    return query.order_by(StudentTutorConnection.created_at.desc(), StudentTutorConnection.id.desc()).all()


def list_tutor_connections(db: Session, tutor_id: int, status: Optional[str] = None) -> list[StudentTutorConnection]:
    _validate_status(status)
    query = db.query(StudentTutorConnection).filter(StudentTutorConnection.tutor_id == tutor_id)
    if status:
        query = query.filter(StudentTutorConnection.status == status)
    return query.order_by(StudentTutorConnection.created_at.desc(), StudentTutorConnection.id.desc()).all()


def respond_to_connection(db: Session, tutor_id: int, connection_id: int, accept: bool) -> StudentTutorConnection:
    """Accept or decline a pending request addressed to ``tutor_id``.

    Accepting links the pair with a non-primary relationship row unless one
    already exists.
    """

    def operation() -> StudentTutorConnection:
        connection = (
            db.query(StudentTutorConnection)
            .filter(StudentTutorConnection.id == connection_id, StudentTutorConnection.tutor_id == tutor_id)
            .with_for_update()
            .first()
        )
        if not connection:
            raise NotFound("Connection request not found")
        if connection.status != CONNECTION_PENDING:
            raise Conflict(f"Connection request already {connection.status}")
        connection.status = CONNECTION_ACCEPTED if accept else CONNECTION_DECLINED
        if accept and not find_tutor_student_link(db, tutor_id, connection.student_id):
            db.add(TutorStudent(tutor_id=tutor_id, student_id=connection.student_id, subject=connection.subject))
        db.flush()
        return connection

    connection = transactional(db, operation, conflict_message=LINK_EXISTS_MESSAGE)
    db.refresh(connection)
    logger.info("Tutor %s %s connection %s", tutor_id, connection.status, connection_id)
    return connection


def link_parent(db: Session, student_id: str, user_id: str, email: str, full_name: str) -> Parent:
    message = "Parent account already exists for this student"

    def operation() -> Parent:
        existing = db.query(Parent).filter(Parent.student_id == student_id, Parent.user_id == user_id).first()
        if existing:
            raise Conflict(message)
        parent = Parent(user_id=user_id, email=email, full_name=full_name, student_id=student_id)
        db.add(parent)
        db.flush()
        return parent

    parent = transactional(db, operation, conflict_message=message)
    db.refresh(parent)
    return parent
