from contextlib import contextmanager
import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from app.core.config import settings
from app.core.exceptions import StorageError

logger = logging.getLogger(__name__)

# SQLAlchemy DB engine
engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

# Create session local class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all models
Base = declarative_base()


def get_db():
    """Yield a DB session and close it after use."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session, conflict_error=None):
    """
    Commit everything staged inside the block as one unit, or roll all of it back.

    A unique-constraint violation is re-raised as ``conflict_error`` when one is
    given; any other database failure becomes a StorageError.
    """
    try:
        yield db
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if conflict_error is not None:
            logger.info(f"Unique constraint rejected write: {e.orig}")
            raise conflict_error from e
        logger.error(f"Integrity error: {e.orig}")
        raise StorageError(details={"reason": str(e.orig)}) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error, transaction rolled back: {e}")
        raise StorageError() from e
    except Exception:
        db.rollback()
        raise
