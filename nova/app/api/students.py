"""Student endpoints for tutors."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from nova.app.db.session import get_db
from nova.app.dependencies.auth import get_current_tutor_id
from nova.app.schemas.student import StudentCreate, StudentDetail, StudentRead, StudentUpdate
from nova.app.services import student_service

router = APIRouter(prefix="/students", tags=["students"])


@router.post("", response_model=StudentRead, status_code=status.HTTP_201_CREATED)
def create_student(student_in: StudentCreate, db: Session = Depends(get_db), tutor_id: int = Depends(get_current_tutor_id)):
    return student_service.create_student(db, tutor_id, student_in)


@router.get("", response_model=list[StudentRead])
async def list_students(db: Session = Depends(get_db), tutor_id: int = Depends(get_current_tutor_id)):
    return student_service.list_students(db, tutor_id)


@router.get("/{student_id}", response_model=StudentDetail)
async def get_student(student_id: str, db: Session = Depends(get_db), tutor_id: int = Depends(get_current_tutor_id)):
    return student_service.get_student(db, tutor_id, student_id)


@router.patch("/{student_id}", response_model=StudentRead)
def update_student(
    student_id: str,
    student_in: StudentUpdate,
    db: Session = Depends(get_db),
    tutor_id: int = Depends(get_current_tutor_id),
):
    return student_service.update_student(db, tutor_id, student_id, student_in)


@router.delete("/{student_id}")
def delete_student(student_id: str, db: Session = Depends(get_db), tutor_id: int = Depends(get_current_tutor_id)):
    student_service.delete_student(db, tutor_id, student_id)
    return {"status": "deleted", "id": student_id}
