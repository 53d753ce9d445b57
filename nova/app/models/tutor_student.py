"""Tutor-student relationship rows.

A student's owning tutor is the one holding the primary row; additional tutors
get non-primary rows.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint, true
from sqlalchemy.orm import relationship

from nova.app.db.base_class import Base
from nova.app.core.time import utc_now


class TutorStudent(Base):
    __tablename__ = "tutor_students"

    id = Column(Integer, primary_key=True, index=True)
    tutor_id = Column(Integer, ForeignKey("tutors.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(String(36), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    subject = Column(String(100), nullable=False)
    notes = Column(Text, nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    is_primary = Column(Boolean, nullable=False, default=False)
    start_date = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        UniqueConstraint("tutor_id", "student_id", name="uq_tutor_student"),
        Index(
            "uq_student_primary_tutor",
            "student_id",
            unique=True,
            sqlite_where=is_primary == true(),
            postgresql_where=is_primary == true(),
        ),
    )

    tutor = relationship("Tutor", back_populates="tutor_students")
    student = relationship("Student", back_populates="tutor_links")
