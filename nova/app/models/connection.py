"""Student-initiated connection requests toward a tutor."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from nova.app.db.base_class import Base
from nova.app.core.time import utc_now

CONNECTION_PENDING = "pending"
CONNECTION_ACCEPTED = "accepted"
CONNECTION_DECLINED = "declined"


class StudentTutorConnection(Base):
    __tablename__ = "student_tutor_connections"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(String(36), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    tutor_id = Column(Integer, ForeignKey("tutors.id", ondelete="CASCADE"), nullable=False, index=True)
    subject = Column(String(100), nullable=False)
    request_message = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=CONNECTION_PENDING)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        UniqueConstraint("student_id", "tutor_id", "subject", name="uq_student_tutor_subject"),
    )

    student = relationship("Student", back_populates="connections")
    tutor = relationship("Tutor", back_populates="connections")
