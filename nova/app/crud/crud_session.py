"""CRUD operations for tutoring sessions.

Writes only flush; the calling service owns the transaction.
"""

from typing import List

from sqlalchemy.orm import Session

from nova.app.models.session import Session as SessionModel


class CRUDSession:
    def create(self, db: Session, *, tutor_id: int, **fields) -> SessionModel:
        obj = SessionModel(tutor_id=tutor_id, **fields)
        db.add(obj)
        db.flush()
        return obj

    def get_multi_for_student(
        self,
        db: Session,
        *,
        student_id: str,
        tutor_id: int | None = None,
        limit: int | None = None,
    ) -> List[SessionModel]:
        query = db.query(SessionModel).filter(SessionModel.student_id == student_id)
        if tutor_id is not None:
            query = query.filter(SessionModel.tutor_id == tutor_id)
        query = query.order_by(SessionModel.start_time.desc(), SessionModel.id.desc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def update(self, db: Session, *, db_obj: SessionModel, update_data: dict) -> SessionModel:
        for field, value in update_data.items():
            setattr(db_obj, field, value)
        db.flush()
        return db_obj

    def delete(self, db: Session, *, db_obj: SessionModel) -> SessionModel:
        db.delete(db_obj)
        db.flush()
        return db_obj


session_crud = CRUDSession()
