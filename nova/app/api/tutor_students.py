"""Tutor-student relationship endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from nova.app.db.session import get_db
from nova.app.dependencies.auth import get_current_tutor_id
from nova.app.schemas.relationship import TutorStudentCreate, TutorStudentRead
from nova.app.services import relationship_registry

router = APIRouter(prefix="/tutor-students", tags=["tutor-students"])


@router.post("", response_model=TutorStudentRead, status_code=status.HTTP_201_CREATED)
def create_tutor_student(
    link_in: TutorStudentCreate,
    db: Session = Depends(get_db),
    tutor_id: int = Depends(get_current_tutor_id),
):
    return relationship_registry.create_tutor_student_link(
        db,
        tutor_id=tutor_id,
        student_id=link_in.student_id,
        subject=link_in.subject,
        notes=link_in.notes,
    )


@router.get("", response_model=list[TutorStudentRead])
async def list_tutor_students(db: Session = Depends(get_db), tutor_id: int = Depends(get_current_tutor_id)):
    return relationship_registry.list_tutor_students(db, tutor_id)
