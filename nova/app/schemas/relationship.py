"""Tutor-student relationship and connection request schemas."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nova.app.core.time import ensure_utc
from nova.app.schemas.tutor import TutorRead

ConnectionStatus = Literal["pending", "accepted", "declined"]


class LinkedStudent(BaseModel):
    id: str
    full_name: str
    subject: str
    year: str
    active: bool

    model_config = ConfigDict(from_attributes=True)


class TutorStudentCreate(BaseModel):
    student_id: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    notes: Optional[str] = None


class TutorStudentRead(BaseModel):
    id: int
    tutor_id: int
    student_id: str
    subject: str
    notes: Optional[str] = None
    active: bool
    is_primary: bool
    start_date: datetime
    created_at: datetime
    updated_at: datetime
    tutor: TutorRead
    student: LinkedStudent

    model_config = ConfigDict(from_attributes=True)

    @field_validator("start_date", "created_at", "updated_at")
    @classmethod
    def ensure_timezone(cls, value):
        return ensure_utc(value)


class ConnectionCreate(BaseModel):
    tutor_id: int
    subject: str = Field(min_length=1)
    request_message: Optional[str] = None


class ConnectionRead(BaseModel):
    id: int
    student_id: str
    tutor_id: int
    subject: str
    request_message: Optional[str] = None
    status: ConnectionStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_timezone(cls, value):
        return ensure_utc(value)
