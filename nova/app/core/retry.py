"""Unit-of-work runner with bounded retries for transient store failures."""

import logging
import time
from typing import Callable, TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from nova.app.core.errors import Conflict, StoreUnavailable
from nova.app.core.settings import get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


def transactional(
    db: Session,
    operation: Callable[[], T],
    *,
    conflict_message: str = "Record already exists",
    attempts: int | None = None,
    base_delay: float | None = None,
) -> T:
    """Run ``operation`` and commit it as one transaction.

    ``OperationalError`` is retried with exponential backoff; anything else
    rolls back and propagates. Store uniqueness violations surface as
    ``Conflict`` so raw driver messages never reach callers.
    """
    settings = get_settings()
    max_attempts = attempts if attempts is not None else settings.store_retry_attempts
    delay = base_delay if base_delay is not None else settings.store_retry_base_delay

    for attempt in range(1, max_attempts + 1):
        try:
            result = operation()
            db.commit()
            return result
        except OperationalError as exc:
            db.rollback()
            if attempt >= max_attempts:
                logger.error("Store unavailable after %s attempts: %s", attempt, exc.__class__.__name__)
                raise StoreUnavailable("The data store is temporarily unavailable") from exc
            wait = delay * (2 ** (attempt - 1))
            logger.warning("Transient store failure (attempt %s/%s), retrying in %.2fs", attempt, max_attempts, wait)
            time.sleep(wait)
        except IntegrityError as exc:
            db.rollback()
            raise Conflict(conflict_message) from exc
        except Exception:
            db.rollback()
            raise
    raise StoreUnavailable("The data store is temporarily unavailable")
