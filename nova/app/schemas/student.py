"""Student schemas for Nova."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from nova.app.core.time import ensure_utc
from nova.app.schemas.session import SessionRead


class StudentBase(BaseModel):
    full_name: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    year: str = Field(min_length=1)
    parent_email: Optional[EmailStr] = None


class StudentCreate(StudentBase):
    active: bool = True


class StudentUpdate(BaseModel):
    full_name: Optional[str] = Field(default=None, min_length=1)
    subject: Optional[str] = Field(default=None, min_length=1)
    year: Optional[str] = Field(default=None, min_length=1)
    active: Optional[bool] = None
    parent_email: Optional[EmailStr] = None


class StudentRead(BaseModel):
    id: str
    full_name: str
    subject: str
    year: str
    active: bool
    email: Optional[str] = None
    parent_email: Optional[str] = None
    parent_link_token: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_timezone(cls, value):
        return ensure_utc(value)


class StudentDetail(StudentRead):
    sessions: list[SessionRead] = []


class PublicTutor(BaseModel):
    email: str


class PublicStudentRead(BaseModel):
    """The only student projection served without a session."""

    id: str
    full_name: str
    subject: str
    year: str
    active: bool
    tutor: Optional[PublicTutor] = None


class StudentAccountCreate(BaseModel):
    full_name: str = Field(min_length=1)
    subject: str = "General"
    year: str = "Not specified"


class StudentAccountUpdate(BaseModel):
    full_name: Optional[str] = Field(default=None, min_length=1)
    subject: Optional[str] = Field(default=None, min_length=1)
    year: Optional[str] = Field(default=None, min_length=1)
    parent_email: Optional[EmailStr] = None


class ParentAccountCreate(BaseModel):
    full_name: str = Field(min_length=1)
    parent_link_token: str = Field(min_length=1)


class ParentRead(BaseModel):
    id: int
    user_id: str
    email: str
    full_name: str
    student_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def ensure_timezone(cls, value):
        return ensure_utc(value)
