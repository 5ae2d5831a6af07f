"""
Shared plumbing for the SQLAlchemy backed stores.

Each store call gets its own session and transaction: commit on success,
rollback on any error. SQLAlchemy errors leave this module as StoreError
subclasses only.
"""

from contextlib import contextmanager
import logging

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from app.services.errors import StoreError, QueryTimeoutError

logger = logging.getLogger(__name__)

TIMEOUT_MARKERS = ("statement timeout", "canceling statement", "database is locked", "timeout")


def is_unique_violation(error: IntegrityError, column: str) -> bool:
    """
    True when the integrity error is a unique constraint failure on `column`.
    Matches both PostgreSQL ("duplicate key value violates unique constraint
    "actors_full_name_key"") and SQLite ("UNIQUE constraint failed: actors.full_name").
    """
    message = str(error.orig).lower()
    return ("unique" in message or "duplicate" in message) and column in message


def translate_error(error: SQLAlchemyError) -> StoreError:
    if isinstance(error, PoolTimeoutError):
        return QueryTimeoutError(str(error))
    if isinstance(error, OperationalError):
        message = str(error.orig).lower()
        if any(marker in message for marker in TIMEOUT_MARKERS):
            return QueryTimeoutError(str(error.orig))
    return StoreError(str(error))


class SQLAlchemyStore:
    """Base for stores that run against a relational database"""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @contextmanager
    def transaction(self):
        db: Session = self.session_factory()
        try:
            yield db
            db.commit()
        except StoreError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Store operation failed: {str(e)}")
            raise translate_error(e) from e
        finally:
            db.close()
