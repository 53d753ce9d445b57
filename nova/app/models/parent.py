"""Parent account model for families who sign in instead of using the share link."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from nova.app.db.base_class import Base
from nova.app.core.time import utc_now


class Parent(Base):
    __tablename__ = "parents"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    email = Column(String(320), nullable=False)
    full_name = Column(String(255), nullable=False)
    student_id = Column(String(36), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    __table_args__ = (
        UniqueConstraint("student_id", "user_id", name="uq_parent_student"),
    )

    student = relationship("Student", back_populates="parents")
