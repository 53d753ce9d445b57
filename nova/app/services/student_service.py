"""Student lifecycle operations for tutors.

Every path that can leave a student active goes through
``capacity_policy.ensure_capacity`` inside the same transaction as the write.
"""

import logging

from sqlalchemy.orm import Session

from nova.app.core.errors import NotFound
from nova.app.core.retry import transactional
from nova.app.models.student import Student
from nova.app.models.tutor_student import TutorStudent
from nova.app.schemas.student import PublicStudentRead, StudentCreate, StudentUpdate
from nova.app.services import access_gateway, capacity_policy
from nova.app.services.tokens import generate_parent_link_token

logger = logging.getLogger(__name__)


def create_student(db: Session, tutor_id: int, student_in: StudentCreate) -> Student:
    def operation() -> Student:
        if student_in.active:
            capacity_policy.ensure_capacity(db, tutor_id)
        else:
            capacity_policy.lock_tutor(db, tutor_id)
        # Token is only minted once the policy has allowed the create
        student = Student(
            full_name=student_in.full_name,
            subject=student_in.subject,
            year=student_in.year,
            active=student_in.active,
            parent_email=student_in.parent_email,
            parent_link_token=generate_parent_link_token(),
        )
        db.add(student)
        db.flush()
        db.add(
            TutorStudent(
                tutor_id=tutor_id,
                student_id=student.id,
                subject=student.subject,
                active=student.active,
                is_primary=True,
            )
        )
        db.flush()
        return student

    student = transactional(db, operation, conflict_message="Student already exists")
    db.refresh(student)
    logger.info("Tutor %s created student %s", tutor_id, student.id)
    return student


def list_students(db: Session, tutor_id: int) -> list[Student]:
    return (
        db.query(Student)
        .join(TutorStudent, TutorStudent.student_id == Student.id)
        .filter(TutorStudent.tutor_id == tutor_id, TutorStudent.is_primary.is_(True))
        .order_by(Student.created_at.desc())
        .all()
    )


def get_student(db: Session, tutor_id: int, student_id: str) -> Student:
    return access_gateway.get_owned_student(db, tutor_id, student_id)


def update_student(db: Session, tutor_id: int, student_id: str, student_in: StudentUpdate) -> Student:
    update_data = student_in.model_dump(exclude_unset=True)
    # Explicit nulls are ignored; only parent_email may be cleared
    update_data = {field: value for field, value in update_data.items() if value is not None or field == "parent_email"}

    def operation() -> Student:
        student = access_gateway.get_owned_student(db, tutor_id, student_id)
        if update_data.get("active") is True:
            capacity_policy.ensure_capacity(db, tutor_id, candidate_student_id=student.id)
        for field, value in update_data.items():
            setattr(student, field, value)
        if "active" in update_data and student.primary_link is not None:
            student.primary_link.active = student.active
        db.flush()
        return student

    student = transactional(db, operation)
    db.refresh(student)
    logger.info("Tutor %s updated student %s (%s)", tutor_id, student_id, ", ".join(sorted(update_data)) or "no changes")
    return student


def delete_student(db: Session, tutor_id: int, student_id: str) -> None:
    def operation() -> None:
        student = access_gateway.get_owned_student(db, tutor_id, student_id)
        db.delete(student)
        db.flush()

    transactional(db, operation)
    logger.info("Tutor %s deleted student %s", tutor_id, student_id)


def get_public_student(db: Session, student_id: str) -> PublicStudentRead:
    student = db.query(Student).filter(Student.id == student_id).first()
    if not student:
        raise NotFound("Student not found")
    return access_gateway.public_projection(student)


def get_student_by_parent_token(db: Session, token: str) -> PublicStudentRead:
    student = access_gateway.resolve_parent_token(db, token)
    return access_gateway.public_projection(student)


def list_parent_account_students(db: Session, parent_user_id: str) -> list[PublicStudentRead]:
    students = access_gateway.list_parent_students(db, parent_user_id)
    return [access_gateway.public_projection(student) for student in students]
