"""Tutor profile schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nova.app.core.time import ensure_utc


class TutorProfileUpsert(BaseModel):
    display_name: str = Field(min_length=1)
    subjects: list[str] = Field(min_length=1)
    bio: Optional[str] = None
    experience: Optional[str] = None
    hourly_rate: Optional[Decimal] = Field(default=None, ge=0)
    availability: Optional[str] = None
    profile_image: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    active: bool = True

    @field_validator("subjects")
    @classmethod
    def clean_subjects(cls, value: list[str]) -> list[str]:
        cleaned = list(dict.fromkeys(subject.strip() for subject in value if subject.strip()))
        if not cleaned:
            raise ValueError("At least one subject is required")
        return cleaned


class TutorSummary(BaseModel):
    id: int
    email: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def ensure_timezone(cls, value):
        return ensure_utc(value)


class TutorProfileRead(BaseModel):
    id: int
    tutor_id: int
    display_name: str
    subjects: list[str]
    bio: Optional[str] = None
    experience: Optional[str] = None
    hourly_rate: Optional[Decimal] = None
    availability: Optional[str] = None
    profile_image: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    verified: bool
    rating: Decimal
    total_sessions: int
    active: bool
    created_at: datetime
    updated_at: datetime
    tutor: TutorSummary

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_timezone(cls, value):
        return ensure_utc(value)


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_count: int
    has_next_page: bool
    has_prev_page: bool


class TutorProfilePage(BaseModel):
    tutors: list[TutorProfileRead]
    pagination: Pagination


class TutorProfileDetail(BaseModel):
    tutor: TutorSummary
    profile: Optional[TutorProfileRead] = None


class ProfileCompleteness(BaseModel):
    is_complete: bool
