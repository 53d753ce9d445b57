"""Active-student capacity policy.

``can_activate`` and ``decide`` are pure; ``ensure_capacity`` reads the live
count under a lock on the tutor row and must run inside the same transaction
as the write that activates or creates the student.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from nova.app.core.errors import CapacityExceeded, NotFound
from nova.app.core.settings import get_settings
from nova.app.models.student import Student
from nova.app.models.tutor import Tutor
from nova.app.models.tutor_student import TutorStudent


@dataclass(frozen=True)
class CapacityDecision:
    allowed: bool
    active_count: int
    limit: int

    @property
    def reason(self) -> Optional[dict]:
        if self.allowed:
            return None
        return {"kind": CapacityExceeded.kind, "limit": self.limit}


def _resolve_limit(limit: Optional[int]) -> int:
    return limit if limit is not None else get_settings().student_active_limit


def decide(active_count: int, limit: Optional[int] = None) -> CapacityDecision:
    resolved = _resolve_limit(limit)
    return CapacityDecision(allowed=active_count < resolved, active_count=active_count, limit=resolved)


def can_activate(
    students: Iterable,
    candidate_student_id=None,
    *,
    limit: Optional[int] = None,
) -> CapacityDecision:
    """Decide whether one more student may be active for the tutor owning ``students``.

    The candidate is left out of the count so re-activating an already active
    student never counts it twice.
    """
    active_count = sum(
        1 for student in students if student.active and (candidate_student_id is None or student.id != candidate_student_id)
    )
    return decide(active_count, limit)


def lock_tutor(db: Session, tutor_id: int) -> Tutor:
    tutor = db.query(Tutor).filter(Tutor.id == tutor_id).with_for_update().first()
    if tutor is None:
        raise NotFound("Tutor not found")
    return tutor


def count_active_students(db: Session, tutor_id: int, exclude_student_id: Optional[str] = None) -> int:
    query = (
        db.query(func.count(Student.id))
        .join(TutorStudent, TutorStudent.student_id == Student.id)
        .filter(
            TutorStudent.tutor_id == tutor_id,
            TutorStudent.is_primary.is_(True),
            Student.active.is_(True),
        )
    )
    if exclude_student_id is not None:
        query = query.filter(Student.id != exclude_student_id)
    return query.scalar() or 0


def ensure_capacity(db: Session, tutor_id: int, candidate_student_id: Optional[str] = None) -> CapacityDecision:
    """Lock the tutor row, count owned active students and raise when full."""
    lock_tutor(db, tutor_id)
    decision = decide(count_active_students(db, tutor_id, exclude_student_id=candidate_student_id))
    if not decision.allowed:
        raise CapacityExceeded(decision.limit)
    return decision
