"""Tutor and scope schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from nova.app.core.time import ensure_utc


class TutorRead(BaseModel):
    id: int
    user_id: str
    email: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def ensure_timezone(cls, value):
        return ensure_utc(value)


class ScopeRead(BaseModel):
    kind: str
    tutor_id: Optional[int] = None
    student_id: Optional[str] = None
    read_only: bool
