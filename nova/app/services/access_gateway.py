"""Resolve callers to an authorization scope and look up records within it.

Lookups outside the caller's scope raise ``NotFound`` rather than a
forbidden error so the API never confirms that another tutor's record exists.
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Optional

from sqlalchemy.orm import Session

from nova.app.core.errors import NotFound, Unauthenticated
from nova.app.core.security import Identity
from nova.app.core.settings import get_settings
from nova.app.core.time import ensure_utc, utc_now
from nova.app.models.parent import Parent
from nova.app.models.session import Session as SessionModel
from nova.app.models.student import Student
from nova.app.models.tutor import Tutor
from nova.app.models.tutor_student import TutorStudent
from nova.app.schemas.student import PublicStudentRead, PublicTutor


class ScopeKind(str, Enum):
    TUTOR_OWNER = "tutor_owner"
    STUDENT_OWNER = "student_owner"
    PARENT_VIEWER = "parent_viewer"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class Scope:
    kind: ScopeKind
    tutor_id: Optional[int] = None
    student_id: Optional[str] = None
    identity: Optional[Identity] = None

    @property
    def read_only(self) -> bool:
        return self.kind in (ScopeKind.PARENT_VIEWER, ScopeKind.UNAUTHENTICATED)


UNAUTHENTICATED = Scope(kind=ScopeKind.UNAUTHENTICATED)


def resolve_scope(db: Session, identity: Optional[Identity], parent_token: Optional[str] = None) -> Scope:
    if identity is not None:
        tutor = db.query(Tutor).filter(Tutor.user_id == identity.subject_id).first()
        if tutor is not None:
            return Scope(kind=ScopeKind.TUTOR_OWNER, tutor_id=tutor.id, identity=identity)
        student = db.query(Student).filter(Student.user_id == identity.subject_id).first()
        if student is not None:
            return Scope(kind=ScopeKind.STUDENT_OWNER, student_id=student.id, identity=identity)
        parent = (
            db.query(Parent)
            .filter(Parent.user_id == identity.subject_id)
            .order_by(Parent.created_at, Parent.id)
            .first()
        )
        if parent is not None:
            # A parent account views its first linked student by default
            return Scope(kind=ScopeKind.PARENT_VIEWER, student_id=parent.student_id, identity=identity)
        # Signed in but no account yet: only identity-level routes apply
        return Scope(kind=ScopeKind.UNAUTHENTICATED, identity=identity)
    if parent_token:
        try:
            student = resolve_parent_token(db, parent_token)
        except NotFound:
            return UNAUTHENTICATED
        return Scope(kind=ScopeKind.PARENT_VIEWER, student_id=student.id)
    return UNAUTHENTICATED


def require_tutor(scope: Scope) -> int:
    if scope.kind == ScopeKind.TUTOR_OWNER:
        return scope.tutor_id
    if scope.kind == ScopeKind.UNAUTHENTICATED and scope.identity is None:
        raise Unauthenticated("Authentication required")
    raise NotFound("Tutor not found")


def require_student(scope: Scope) -> str:
    if scope.kind == ScopeKind.STUDENT_OWNER:
        return scope.student_id
    if scope.kind == ScopeKind.UNAUTHENTICATED and scope.identity is None:
        raise Unauthenticated("Authentication required")
    raise NotFound("Student account not found")


def require_parent_account(scope: Scope) -> str:
    """Return the auth subject of a signed-in parent account."""
    if scope.kind == ScopeKind.PARENT_VIEWER and scope.identity is not None:
        return scope.identity.subject_id
    if scope.kind == ScopeKind.UNAUTHENTICATED and scope.identity is None:
        raise Unauthenticated("Authentication required")
    raise NotFound("Parent account not found")


def resolve_parent_token(db: Session, token: str) -> Student:
    """Return the student whose parent-link token equals ``token`` exactly."""
    if not token:
        raise NotFound("Student not found")
    student = db.query(Student).filter(Student.parent_link_token == token).first()
    if student is None:
        raise NotFound("Student not found")
    ttl_days = get_settings().parent_link_token_ttl_days
    if ttl_days is not None:
        issued_at = ensure_utc(student.parent_link_token_issued_at)
        if issued_at + timedelta(days=ttl_days) < utc_now():
            raise NotFound("Student not found")
    return student


def get_owned_student(db: Session, tutor_id: int, student_id: str) -> Student:
    """A student whose primary relationship belongs to ``tutor_id``."""
    student = (
        db.query(Student)
        .join(TutorStudent, TutorStudent.student_id == Student.id)
        .filter(
            Student.id == student_id,
            TutorStudent.tutor_id == tutor_id,
            TutorStudent.is_primary.is_(True),
        )
        .first()
    )
    if not student:
        raise NotFound("Student not found")
    return student


def get_linked_student(db: Session, tutor_id: int, student_id: str) -> Student:
    """A student with any relationship row (primary or not) to ``tutor_id``."""
    student = (
        db.query(Student)
        .join(TutorStudent, TutorStudent.student_id == Student.id)
        .filter(Student.id == student_id, TutorStudent.tutor_id == tutor_id)
        .first()
    )
    if not student:
        raise NotFound("Student not found")
    return student


def get_parent_student(db: Session, parent_user_id: str, student_id: str) -> Student:
    """A student the parent account with ``parent_user_id`` is linked to."""
    student = (
        db.query(Student)
        .join(Parent, Parent.student_id == Student.id)
        .filter(Student.id == student_id, Parent.user_id == parent_user_id)
        .first()
    )
    if not student:
        raise NotFound("Student not found")
    return student


def list_parent_students(db: Session, parent_user_id: str) -> list[Student]:
    return (
        db.query(Student)
        .join(Parent, Parent.student_id == Student.id)
        .filter(Parent.user_id == parent_user_id)
        .order_by(Parent.created_at, Parent.id)
        .all()
    )


def get_owned_session(db: Session, tutor_id: int, session_id: int) -> SessionModel:
    session_obj = (
        db.query(SessionModel)
        .filter(SessionModel.id == session_id, SessionModel.tutor_id == tutor_id)
        .first()
    )
    if not session_obj:
        raise NotFound("Session not found")
    return session_obj


def public_projection(student: Student) -> PublicStudentRead:
    tutor = student.primary_tutor
    return PublicStudentRead(
        id=student.id,
        full_name=student.full_name,
        subject=student.subject,
        year=student.year,
        active=student.active,
        tutor=PublicTutor(email=tutor.email) if tutor else None,
    )
