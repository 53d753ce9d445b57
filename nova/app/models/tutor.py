"""Tutor account model."""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from nova.app.db.base_class import Base
from nova.app.core.time import utc_now


class Tutor(Base):
    __tablename__ = "tutors"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), unique=True, index=True, nullable=False)
    email = Column(String(320), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    tutor_students = relationship("TutorStudent", back_populates="tutor", cascade="all, delete-orphan")
    connections = relationship("StudentTutorConnection", back_populates="tutor", cascade="all, delete-orphan")
    sessions = relationship("Session", back_populates="tutor", cascade="all, delete-orphan")
    profile = relationship("TutorProfile", back_populates="tutor", uselist=False, cascade="all, delete-orphan")
