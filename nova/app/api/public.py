"""Unauthenticated read-only endpoints for parents and share links."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from nova.app.db.session import get_db
from nova.app.schemas.session import ParentSessionRead
from nova.app.schemas.student import PublicStudentRead
from nova.app.services import session_service, student_service

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/students/{student_id}", response_model=PublicStudentRead)
async def get_public_student(student_id: str, db: Session = Depends(get_db)):
    return student_service.get_public_student(db, student_id)


@router.get("/parent/{token}", response_model=PublicStudentRead)
async def get_student_by_parent_token(token: str, db: Session = Depends(get_db)):
    return student_service.get_student_by_parent_token(db, token)


@router.get("/parent/{token}/sessions", response_model=list[ParentSessionRead])
async def list_parent_sessions(token: str, db: Session = Depends(get_db)):
    return session_service.list_parent_sessions(db, token)
