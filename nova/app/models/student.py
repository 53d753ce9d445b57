"""Student model for Nova."""

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship

from nova.app.db.base_class import Base
from nova.app.core.time import utc_now


def _new_student_id() -> str:
    return str(uuid4())


class Student(Base):
    __tablename__ = "students"

    id = Column(String(36), primary_key=True, default=_new_student_id)
    user_id = Column(String(255), unique=True, index=True, nullable=True)
    email = Column(String(320), unique=True, nullable=True)
    full_name = Column(String(255), nullable=False)
    subject = Column(String(100), nullable=False)
    year = Column(String(50), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    parent_email = Column(String(320), nullable=True)
    parent_link_token = Column(String(128), unique=True, index=True, nullable=False)
    parent_link_token_issued_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    tutor_links = relationship("TutorStudent", back_populates="student", cascade="all, delete-orphan")
    connections = relationship("StudentTutorConnection", back_populates="student", cascade="all, delete-orphan")
    sessions = relationship(
        "Session",
        back_populates="student",
        cascade="all, delete-orphan",
        order_by="Session.start_time.desc()",
    )
    parents = relationship("Parent", back_populates="student", cascade="all, delete-orphan")

    @property
    def primary_link(self):
        return next((link for link in self.tutor_links if link.is_primary), None)

    @property
    def primary_tutor(self):
        link = self.primary_link
        return link.tutor if link else None
