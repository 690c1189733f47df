"""
Atomic unit of work over a session.

Every mutating service method runs its writes inside
unit_of_work(). The writes are flushed together at the end of
the block; if anything fails the session is rolled back, so no
half-applied mutation is ever visible. Committing stays with the
caller, the same as for every other service method.
"""

from contextlib import contextmanager

import structlog
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from envelope_budget.services.errors import ConflictError

logger = structlog.get_logger(__name__)


@contextmanager
def unit_of_work(db: Session, operation: str):
    try:
        yield db
        db.flush()
    except StaleDataError as e:
        db.rollback()
        logger.warning("concurrent_modification", operation=operation)
        raise ConflictError(
            f"{operation} conflicted with a concurrent change; retry"
        ) from e
    except Exception:
        db.rollback()
        logger.error("unit_of_work_rolled_back", operation=operation)
        raise
