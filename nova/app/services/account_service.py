"""Account bootstrap for identities coming from the auth provider."""

import logging

from typing import Optional

from sqlalchemy.orm import Session

from nova.app.core.errors import Conflict, ValidationError
from nova.app.core.retry import transactional
from nova.app.core.security import Identity
from nova.app.models.parent import Parent
from nova.app.models.student import Student
from nova.app.models.tutor import Tutor
from nova.app.schemas.student import ParentAccountCreate, StudentAccountCreate, StudentAccountUpdate
from nova.app.services import access_gateway, relationship_registry
from nova.app.services.tokens import generate_parent_link_token

logger = logging.getLogger(__name__)


def _require_email(identity: Identity) -> str:
    if not identity.email:
        raise ValidationError.for_field("email", "The signed-in account has no email address")
    return identity.email


def registered_role(db: Session, subject_id: str) -> Optional[str]:
    """Which kind of account, if any, ``subject_id`` already holds."""
    if db.query(Tutor).filter(Tutor.user_id == subject_id).first():
        return "tutor"
    if db.query(Student).filter(Student.user_id == subject_id).first():
        return "student"
    if db.query(Parent).filter(Parent.user_id == subject_id).first():
        return "parent"
    return None


def ensure_tutor(db: Session, identity: Identity) -> Tutor:
    """Return the tutor for ``identity``, creating it on first sign-in."""
    email = _require_email(identity)

    def operation() -> Tutor:
        tutor = db.query(Tutor).filter(Tutor.user_id == identity.subject_id).first()
        if tutor:
            return tutor
        role = registered_role(db, identity.subject_id)
        if role is not None:
            raise Conflict(f"This account is registered as a {role}")
        tutor = Tutor(user_id=identity.subject_id, email=email)
        db.add(tutor)
        db.flush()
        logger.info("Created tutor record for subject %s", identity.subject_id)
        return tutor

    tutor = transactional(db, operation, conflict_message="Tutor record already exists")
    db.refresh(tutor)
    return tutor


def create_student_account(db: Session, identity: Identity, account_in: StudentAccountCreate) -> Student:
    email = _require_email(identity)

    def operation() -> Student:
        role = registered_role(db, identity.subject_id)
        if role in ("tutor", "parent"):
            raise Conflict(f"This account is registered as a {role}")
        existing = (
            db.query(Student)
            .filter((Student.user_id == identity.subject_id) | (Student.email == email))
            .first()
        )
        if existing:
            raise Conflict("Account already exists")
        student = Student(
            user_id=identity.subject_id,
            email=email,
            full_name=account_in.full_name,
            subject=account_in.subject,
            year=account_in.year,
            active=True,
            parent_link_token=generate_parent_link_token(),
        )
        db.add(student)
        db.flush()
        return student

    student = transactional(db, operation, conflict_message="Account already exists")
    db.refresh(student)
    logger.info("Self-registered student %s", student.id)
    return student


def get_student_account(db: Session, student_id: str) -> Student:
    return db.query(Student).filter(Student.id == student_id).one()


def update_student_account(db: Session, student_id: str, account_in: StudentAccountUpdate) -> Student:
    update_data = {
        field: value
        for field, value in account_in.model_dump(exclude_unset=True).items()
        if value is not None or field == "parent_email"
    }

    def operation() -> Student:
        student = db.query(Student).filter(Student.id == student_id).one()
        for field, value in update_data.items():
            setattr(student, field, value)
        db.flush()
        return student

    student = transactional(db, operation)
    db.refresh(student)
    return student


def create_parent_account(db: Session, identity: Identity, account_in: ParentAccountCreate) -> Parent:
    """Register a parent account for the student the share link points at."""
    email = _require_email(identity)
    student = access_gateway.resolve_parent_token(db, account_in.parent_link_token)
    role = registered_role(db, identity.subject_id)
    if role in ("tutor", "student"):
        raise Conflict(f"This account is registered as a {role}")
    return relationship_registry.link_parent(
        db,
        student_id=student.id,
        user_id=identity.subject_id,
        email=email,
        full_name=account_in.full_name,
    )
