# timesheet-backend/app/db/session.py
import logging
from typing import Callable, TypeVar

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings
from app.core.errors import StoreUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Yields a request-scoped session and always closes it."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def with_store_retry(db: Session, fn: Callable[[], T], attempts: int | None = None) -> T:
    """
    Runs a read against the store, retrying after a dropped connection.
    Gives up with StoreUnavailable once the extra attempts are used.
    """
    retries = settings.DB_RETRY_ATTEMPTS if attempts is None else attempts
    for attempt in range(retries + 1):
        try:
            return fn()
        except OperationalError as exc:
            db.rollback()
            if attempt == retries:
                logger.error("Store unavailable after %d attempts: %s", attempt + 1, exc)
                raise StoreUnavailable("The database is temporarily unavailable") from exc
            logger.warning("Store read failed (attempt %d), retrying: %s", attempt + 1, exc)
    raise StoreUnavailable("The database is temporarily unavailable")
