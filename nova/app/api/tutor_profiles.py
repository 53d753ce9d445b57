"""Tutor profile directory and self-service profile editing."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from nova.app.db.session import get_db
from nova.app.dependencies.auth import get_current_tutor_id
from nova.app.schemas.tutor_profile import (
    ProfileCompleteness,
    TutorProfileDetail,
    TutorProfilePage,
    TutorProfileRead,
    TutorProfileUpsert,
)
from nova.app.services import tutor_profiles

router = APIRouter(prefix="/tutor-profiles", tags=["tutor-profiles"])


@router.get("", response_model=TutorProfilePage)
async def browse_tutor_profiles(
    subject: Optional[str] = None,
    page: int = 1,
    limit: int = tutor_profiles.DEFAULT_PAGE_SIZE,
    db: Session = Depends(get_db),
):
    return tutor_profiles.browse_profiles(db, subject=subject, page=page, limit=limit)


@router.get("/me", response_model=TutorProfileDetail)
async def read_my_profile(db: Session = Depends(get_db), tutor_id: int = Depends(get_current_tutor_id)):
    return tutor_profiles.get_tutor_profile(db, tutor_id)


@router.put("/me", response_model=TutorProfileRead)
def save_my_profile(
    profile_in: TutorProfileUpsert,
    db: Session = Depends(get_db),
    tutor_id: int = Depends(get_current_tutor_id),
):
    return tutor_profiles.upsert_profile(db, tutor_id, profile_in)


@router.get("/me/complete", response_model=ProfileCompleteness)
async def check_my_profile(db: Session = Depends(get_db), tutor_id: int = Depends(get_current_tutor_id)):
    return tutor_profiles.check_profile_complete(db, tutor_id)


@router.get("/{tutor_id}", response_model=TutorProfileDetail)
async def read_tutor_profile(tutor_id: int, db: Session = Depends(get_db)):
    return tutor_profiles.get_tutor_profile(db, tutor_id)
