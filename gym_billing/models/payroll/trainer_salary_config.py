"""Trainer salary configuration model."""

from datetime import date as Date
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Date as SQLDate, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from gym_billing.models.base import Money, TenantModel


class TrainerSalaryConfig(TenantModel):
    """
    Salary terms for a trainer from ``effective_from`` onwards.

    New terms are added as new rows; the row in force on a date is the
    active one with the latest ``effective_from`` not after that date.
    """

    __tablename__ = "trainer_salary_configs"
    __table_args__ = (
        CheckConstraint("base_salary >= 0", name="ck_salary_config_base_non_negative"),
        CheckConstraint("per_member_incentive >= 0", name="ck_salary_config_incentive_non_negative"),
        Index("ix_salary_config_trainer_effective", "trainer_id", "effective_from"),
    )

    trainer_id: Mapped[int] = mapped_column(
        ForeignKey("trainers.id", ondelete="RESTRICT"),
        nullable=False,
    )
    base_salary: Mapped[Decimal] = mapped_column(Money, nullable=False)
    per_member_incentive: Mapped[Decimal] = mapped_column(Money, nullable=False)
    effective_from: Mapped[Date] = mapped_column(SQLDate, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
