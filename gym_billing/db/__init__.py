"""Database engine, session factory and schema bootstrap."""
from gym_billing.db.base import Base
from gym_billing.db.session import SessionLocal, build_engine, build_session_factory, engine

__all__ = ["Base", "SessionLocal", "build_engine", "build_session_factory", "engine"]
