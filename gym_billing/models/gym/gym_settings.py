"""Per-gym billing settings."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from gym_billing.db.base import Base


class GymSettingsRecord(Base):
    """Stored settings row; gyms without one use the application defaults."""

    __tablename__ = "gym_settings"
    __table_args__ = (
        CheckConstraint("invoice_overdue_in_days >= 1", name="ck_gym_overdue_days"),
        CheckConstraint("member_inactive_in_days >= 1", name="ck_gym_inactive_days"),
    )

    gym_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    invoice_overdue_in_days: Mapped[int] = mapped_column(Integer, nullable=False)
    member_inactive_in_days: Mapped[int] = mapped_column(Integer, nullable=False)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
