"""Trainer salary slip model."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from gym_billing.models.base import Money, PaymentStatus, TenantModel, enum_type


class TrainerSalarySlip(TenantModel):
    """
    Monthly salary slip.

    Figures are a snapshot taken at generation and never change afterwards;
    only the payment fields move between Unpaid and Paid.
    """

    __tablename__ = "trainer_salary_slips"
    __table_args__ = (
        UniqueConstraint("trainer_id", "month", "year", name="uq_salary_slip_period"),
        CheckConstraint("month BETWEEN 1 AND 12", name="ck_salary_slip_month"),
    )

    trainer_id: Mapped[int] = mapped_column(
        ForeignKey("trainers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    # ==================== Figures ====================
    base_salary: Mapped[Decimal] = mapped_column(Money, nullable=False)
    active_member_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    per_member_incentive: Mapped[Decimal] = mapped_column(Money, nullable=False)
    incentive_total: Mapped[Decimal] = mapped_column(Money, nullable=False)
    gross_salary: Mapped[Decimal] = mapped_column(Money, nullable=False)

    # ==================== Payment ====================
    payment_status: Mapped[PaymentStatus] = mapped_column(
        enum_type(PaymentStatus, "salary_payment_status_enum"),
        nullable=False,
        default=PaymentStatus.UNPAID,
        index=True,
    )
    generated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    paid_account_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("accounts.id", ondelete="RESTRICT"),
        nullable=True,
    )
    ledger_entry_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("account_ledger_entries.id", ondelete="RESTRICT"),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<TrainerSalarySlip(id={self.id}, trainer_id={self.trainer_id}, "
            f"period={self.month:02d}/{self.year}, gross={self.gross_salary})>"
        )
