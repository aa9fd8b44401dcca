"""Database session management."""
from typing import Callable, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from gym_billing.config.settings import settings


def build_engine(database_url: Optional[str] = None, **kwargs) -> Engine:
    """
    Create an engine for ``database_url`` (defaults to settings).

    SQLite connections get foreign keys switched on and are shareable across
    threads; server databases get the configured connection pool.
    """
    url = database_url or settings.get_database_url()
    options = {"echo": settings.DATABASE_ECHO}

    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False, **settings.DB_CONNECT_ARGS}
    else:
        options.update(
            pool_pre_ping=True,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_POOL_OVERFLOW,
            connect_args=settings.DB_CONNECT_ARGS,
        )
    options.update(kwargs)

    engine = create_engine(url, **options)

    if url.startswith("sqlite"):
        @event.listens_for(engine, "connect")
        def _enable_sqlite_fk(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def build_session_factory(engine: Engine) -> Callable[[], Session]:
    """Return a session factory bound to ``engine``."""
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


engine = build_engine()

# Create SessionLocal class
SessionLocal = build_session_factory(engine)

