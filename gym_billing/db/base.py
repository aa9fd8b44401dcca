"""SQLAlchemy Base class for all models."""
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base shared by every mapped class."""


def import_models() -> None:
    """Import all models to register them with SQLAlchemy metadata."""
    # noqa imports: registration happens as a side effect of import
    import gym_billing.models  # noqa: F401
