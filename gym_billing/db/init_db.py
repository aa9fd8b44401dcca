# gym_billing/db/init_db.py
"""Database initialization utilities."""
import logging
from typing import Optional

from sqlalchemy.engine import Engine

from gym_billing.db.base import Base, import_models

logger = logging.getLogger(__name__)


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Create all tables that do not exist yet.

    Note: This is suitable for development/testing only.
    For production, use migrations instead.
    """
    if bind is None:
        from gym_billing.db.session import engine as bind

    import_models()
    Base.metadata.create_all(bind=bind)
    logger.info("Database tables ensured (%d tables)", len(Base.metadata.tables))


def drop_db(bind: Optional[Engine] = None) -> None:
    """
    Drop all database tables.

    WARNING: This will delete all data! Only for development/testing purposes.
    """
    if bind is None:
        from gym_billing.db.session import engine as bind

    import_models()
    Base.metadata.drop_all(bind=bind)
    logger.warning("All database tables dropped")
