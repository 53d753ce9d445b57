"""Public-facing tutor profiles that students browse before requesting a tutor."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint, func, select
from sqlalchemy.orm import column_property, relationship

from nova.app.db.base_class import Base
from nova.app.core.time import utc_now
from nova.app.models.session import Session


class TutorProfile(Base):
    __tablename__ = "tutor_profiles"

    id = Column(Integer, primary_key=True, index=True)
    tutor_id = Column(Integer, ForeignKey("tutors.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    display_name = Column(String(255), nullable=False)
    bio = Column(Text, nullable=True)
    experience = Column(Text, nullable=True)
    hourly_rate = Column(Numeric(10, 2), nullable=True)
    availability = Column(Text, nullable=True)
    profile_image = Column(String(1024), nullable=True)
    country = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    # Moderation fields; tutors cannot set these themselves
    verified = Column(Boolean, nullable=False, default=False)
    rating = Column(Numeric(3, 2), nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    total_sessions = column_property(
        select(func.count(Session.id))
        .where(Session.tutor_id == tutor_id, Session.status == "completed")
        .correlate_except(Session)
        .scalar_subquery()
    )

    tutor = relationship("Tutor", back_populates="profile")
    subject_rows = relationship(
        "TutorProfileSubject",
        back_populates="profile",
        cascade="all, delete-orphan",
        order_by="TutorProfileSubject.position",
    )

    @property
    def subjects(self) -> list[str]:
        return [row.subject for row in self.subject_rows]


class TutorProfileSubject(Base):
    __tablename__ = "tutor_profile_subjects"

    id = Column(Integer, primary_key=True, index=True)
    profile_id = Column(Integer, ForeignKey("tutor_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    subject = Column(String(100), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("profile_id", "subject", name="uq_profile_subject"),
    )

    profile = relationship("TutorProfile", back_populates="subject_rows")
