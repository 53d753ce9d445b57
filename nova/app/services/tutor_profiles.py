"""Tutor profiles: the directory students browse to find a tutor_id to request."""

import logging
import math
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from nova.app.core.errors import NotFound
from nova.app.core.retry import transactional
from nova.app.models.tutor import Tutor
from nova.app.models.tutor_profile import TutorProfile, TutorProfileSubject
from nova.app.schemas.tutor_profile import (
    Pagination,
    ProfileCompleteness,
    TutorProfileDetail,
    TutorProfilePage,
    TutorProfileRead,
    TutorProfileUpsert,
    TutorSummary,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 50
OPTIONAL_TEXT_FIELDS = ("bio", "experience", "availability", "profile_image", "country", "city")


def clamp_paging(page: int, limit: int) -> tuple[int, int]:
    return max(1, page), min(MAX_PAGE_SIZE, max(1, limit))


def browse_profiles(
    db: Session,
    subject: Optional[str] = None,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> TutorProfilePage:
    """Active profiles, verified first, then by rating, completed sessions and recency."""
    page, limit = clamp_paging(page, limit)
    query = db.query(TutorProfile).filter(TutorProfile.active.is_(True))
    if subject:
        query = query.filter(TutorProfile.subject_rows.any(TutorProfileSubject.subject == subject))

    total_count = query.count()
    profiles = (
        query.options(selectinload(TutorProfile.subject_rows), selectinload(TutorProfile.tutor))
        .order_by(
            TutorProfile.verified.desc(),
            TutorProfile.rating.desc(),
            TutorProfile.total_sessions.desc(),
            TutorProfile.created_at.desc(),
            TutorProfile.id.desc(),
        )
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    total_pages = math.ceil(total_count / limit)
    return TutorProfilePage(
        tutors=[TutorProfileRead.model_validate(profile) for profile in profiles],
        pagination=Pagination(
            current_page=page,
            total_pages=total_pages,
            total_count=total_count,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        ),
    )


def get_tutor_profile(db: Session, tutor_id: int) -> TutorProfileDetail:
    """The tutor and their profile, which may not exist yet."""
    tutor = db.query(Tutor).filter(Tutor.id == tutor_id).first()
    if not tutor:
        raise NotFound("Tutor not found")
    profile = tutor.profile
    return TutorProfileDetail(
        tutor=TutorSummary.model_validate(tutor),
        profile=TutorProfileRead.model_validate(profile) if profile else None,
    )


def upsert_profile(db: Session, tutor_id: int, profile_in: TutorProfileUpsert) -> TutorProfileRead:
    fields = profile_in.model_dump(exclude={"subjects"})
    # Blank optional text is stored as missing
    for key in OPTIONAL_TEXT_FIELDS:
        fields[key] = fields[key] or None

    def operation() -> TutorProfile:
        profile = db.query(TutorProfile).filter(TutorProfile.tutor_id == tutor_id).first()
        if profile is None:
            if not db.query(Tutor).filter(Tutor.id == tutor_id).first():
                raise NotFound("Tutor not found")
            profile = TutorProfile(tutor_id=tutor_id)
            db.add(profile)
        for key, value in fields.items():
            setattr(profile, key, value)
        profile.subject_rows.clear()
        db.flush()
        for position, subject in enumerate(profile_in.subjects):
            profile.subject_rows.append(TutorProfileSubject(subject=subject, position=position))
        db.flush()
        return profile

    profile = transactional(db, operation, conflict_message="Tutor profile already exists")
    db.refresh(profile)
    logger.info("Tutor %s saved their profile", tutor_id)
    return TutorProfileRead.model_validate(profile)


def is_profile_complete(profile: Optional[TutorProfile]) -> bool:
    if profile is None:
        return False
    return bool(
        profile.display_name
        and profile.subjects
        and profile.profile_image
        and profile.country
        and profile.city
        and profile.bio
        and len(profile.bio) > 20
        and profile.experience
        and len(profile.experience) > 10
        and profile.hourly_rate
        and profile.availability
        and len(profile.availability) > 10
    )


def check_profile_complete(db: Session, tutor_id: int) -> ProfileCompleteness:
    profile = db.query(TutorProfile).filter(TutorProfile.tutor_id == tutor_id).first()
    return ProfileCompleteness(is_complete=is_profile_complete(profile))
