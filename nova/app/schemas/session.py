"""Session schemas for Nova."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nova.app.core.time import ensure_utc

SessionStatus = Literal["scheduled", "completed", "cancelled", "no_show"]


class SessionCreate(BaseModel):
    student_id: str = Field(min_length=1)
    subject: Optional[str] = None
    start_time: datetime
    end_time: datetime
    notes: Optional[str] = None
    homework: Optional[str] = None
    status: SessionStatus = "scheduled"


class SessionUpdate(BaseModel):
    subject: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    notes: Optional[str] = None
    homework: Optional[str] = None
    status: Optional[SessionStatus] = None


class SessionRead(BaseModel):
    id: int
    student_id: str
    tutor_id: int
    subject: str
    start_time: datetime
    end_time: datetime
    status: str
    notes: Optional[str] = None
    homework: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("start_time", "end_time", "created_at", "updated_at")
    @classmethod
    def ensure_timezone(cls, value):
        return ensure_utc(value)


class ParentSessionRead(BaseModel):
    id: int
    subject: str
    start_time: datetime
    end_time: datetime
    status: str
    notes: Optional[str] = None
    homework: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("start_time", "end_time")
    @classmethod
    def ensure_timezone(cls, value):
        return ensure_utc(value)
