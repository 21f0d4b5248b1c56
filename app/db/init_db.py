import logging

from app.db.session import Base, engine

# Register every model on Base.metadata before create_all
from app import models  # noqa: F401

logger = logging.getLogger(__name__)


def init_db(bind=None):
    """Create all tables that do not exist yet."""
    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    logger.info(f"Database tables ensured: {sorted(Base.metadata.tables.keys())}")
