"""Subscription model: a member's priced enrolment in a package."""

from datetime import date as Date
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Date as SQLDate, ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column

from gym_billing.models.base import Money, SubscriptionStatus, TenantModel, enum_type


class Subscription(TenantModel):
    """
    Snapshot of price and period for one member.

    ``end_date`` is fixed at creation from the package duration. Renewal
    creates a new row pointing back through ``renewed_from_id`` and expires
    this one; rows are never deleted.
    """

    __tablename__ = "subscriptions"
    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_subscription_period"),
        Index("ix_subscription_trainer_period", "trainer_id", "start_date", "end_date"),
    )

    member_id: Mapped[int] = mapped_column(
        ForeignKey("members.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    package_id: Mapped[int] = mapped_column(
        ForeignKey("packages.id", ondelete="RESTRICT"),
        nullable=False,
    )
    trainer_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("trainers.id", ondelete="RESTRICT"),
        nullable=True,
    )

    start_date: Mapped[Date] = mapped_column(SQLDate, nullable=False)
    end_date: Mapped[Date] = mapped_column(SQLDate, nullable=False)

    price_paid: Mapped[Decimal] = mapped_column(Money, nullable=False)
    trainer_addon_price: Mapped[Decimal] = mapped_column(
        Money,
        nullable=False,
        default=Decimal("0.00"),
    )

    status: Mapped[SubscriptionStatus] = mapped_column(
        enum_type(SubscriptionStatus, "subscription_status_enum"),
        nullable=False,
        default=SubscriptionStatus.ACTIVE,
        index=True,
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    renewed_from_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("subscriptions.id", ondelete="RESTRICT"),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<Subscription(id={self.id}, member_id={self.member_id}, "
            f"{self.start_date}..{self.end_date}, status={self.status})>"
        )
