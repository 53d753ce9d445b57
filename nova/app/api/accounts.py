"""Self-service accounts for students and parents."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from nova.app.core.security import Identity
from nova.app.db.session import get_db
from nova.app.dependencies.auth import get_current_parent_user_id, get_current_student_id, require_identity
from nova.app.schemas.session import ParentSessionRead
from nova.app.schemas.student import (
    ParentAccountCreate,
    ParentRead,
    PublicStudentRead,
    StudentAccountCreate,
    StudentAccountUpdate,
    StudentRead,
)
from nova.app.services import account_service, session_service, student_service

router = APIRouter(tags=["accounts"])


@router.post("/student-accounts", response_model=StudentRead, status_code=status.HTTP_201_CREATED)
def create_student_account(
    account_in: StudentAccountCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_identity),
):
    return account_service.create_student_account(db, identity, account_in)


@router.get("/student-accounts/me", response_model=StudentRead)
async def read_student_account(db: Session = Depends(get_db), student_id: str = Depends(get_current_student_id)):
    return account_service.get_student_account(db, student_id)


@router.patch("/student-accounts/me", response_model=StudentRead)
def update_student_account(
    account_in: StudentAccountUpdate,
    db: Session = Depends(get_db),
    student_id: str = Depends(get_current_student_id),
):
    return account_service.update_student_account(db, student_id, account_in)


@router.post("/parent-accounts", response_model=ParentRead, status_code=status.HTTP_201_CREATED)
def create_parent_account(
    account_in: ParentAccountCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_identity),
):
    return account_service.create_parent_account(db, identity, account_in)


@router.get("/parent-accounts/me/students", response_model=list[PublicStudentRead])
async def list_parent_students(db: Session = Depends(get_db), parent_user_id: str = Depends(get_current_parent_user_id)):
    return student_service.list_parent_account_students(db, parent_user_id)


@router.get("/parent-accounts/me/students/{student_id}/sessions", response_model=list[ParentSessionRead])
async def list_parent_student_sessions(
    student_id: str,
    db: Session = Depends(get_db),
    parent_user_id: str = Depends(get_current_parent_user_id),
):
    return session_service.list_parent_account_sessions(db, parent_user_id, student_id)
