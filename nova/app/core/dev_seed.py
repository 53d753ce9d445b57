import logging
import os

from sqlalchemy.orm import Session

from nova.app.core.settings import get_settings
from nova.app.models.tutor import Tutor

logger = logging.getLogger(__name__)

DEFAULT_DEV_TUTORS = [
    ("dev-tutor-1", "tutor@test.com"),
    ("dev-tutor-2", "tutor2@test.com"),
]


def ensure_default_dev_tutors(db: Session) -> None:
    """
    Create default tutor records for local development if they do not exist.
    Skips execution when running under pytest or outside development.
    """
    if os.getenv("PYTEST_CURRENT_TEST") or get_settings().environment != "development":
        return

    created = False
    for user_id, email in DEFAULT_DEV_TUTORS:
        existing = db.query(Tutor).filter(Tutor.user_id == user_id).first()
        if existing:
            continue
        db.add(Tutor(user_id=user_id, email=email))
        created = True

    if created:
        db.commit()
        logger.info("Seeded default development tutors")
