"""Connection requests: students ask, tutors answer."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from nova.app.db.session import get_db
from nova.app.dependencies.auth import get_current_student_id, get_current_tutor_id
from nova.app.schemas.relationship import ConnectionCreate, ConnectionRead
from nova.app.services import relationship_registry

router = APIRouter(tags=["connections"])


@router.post("/student-tutor-connections", response_model=ConnectionRead, status_code=status.HTTP_201_CREATED)
def create_connection(
    connection_in: ConnectionCreate,
    db: Session = Depends(get_db),
    student_id: str = Depends(get_current_student_id),
):
    return relationship_registry.create_connection_request(
        db,
        student_id=student_id,
        tutor_id=connection_in.tutor_id,
        subject=connection_in.subject,
        message=connection_in.request_message,
    )


@router.get("/student-tutor-connections", response_model=list[ConnectionRead])
async def list_my_connections(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    student_id: str = Depends(get_current_student_id),
):
    return relationship_registry.list_connections(db, student_id, status_filter)


@router.get("/tutor-connections", response_model=list[ConnectionRead])
async def list_incoming_connections(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    tutor_id: int = Depends(get_current_tutor_id),
):
    return relationship_registry.list_tutor_connections(db, tutor_id, status_filter)


@router.post("/tutor-connections/{connection_id}/accept", response_model=ConnectionRead)
def accept_connection(connection_id: int, db: Session = Depends(get_db), tutor_id: int = Depends(get_current_tutor_id)):
    return relationship_registry.respond_to_connection(db, tutor_id, connection_id, accept=True)


@router.post("/tutor-connections/{connection_id}/decline", response_model=ConnectionRead)
def decline_connection(connection_id: int, db: Session = Depends(get_db), tutor_id: int = Depends(get_current_tutor_id)):
    return relationship_registry.respond_to_connection(db, tutor_id, connection_id, accept=False)
