"""
Invoice models.

An invoice is created together with its subscription and carries the
amount owed for it. ``InvoiceSequence`` is the per-gym counter behind the
sequential invoice numbers.
"""

from datetime import date as Date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    Date as SQLDate,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from gym_billing.db.base import Base
from gym_billing.models.base import (
    InvoiceStatus,
    Money,
    PaymentMethod,
    TenantModel,
    enum_type,
)


class Invoice(TenantModel):
    """Invoice for one subscription."""

    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint("gym_id", "invoice_number", name="uq_invoice_number_per_gym"),
        CheckConstraint("discount >= 0", name="ck_invoice_discount_non_negative"),
        CheckConstraint("net_amount >= 0", name="ck_invoice_net_non_negative"),
    )

    member_id: Mapped[int] = mapped_column(
        ForeignKey("members.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    subscription_id: Mapped[int] = mapped_column(
        ForeignKey("subscriptions.id", ondelete="RESTRICT"),
        nullable=False,
        unique=True,
    )
    invoice_number: Mapped[str] = mapped_column(String(32), nullable=False)

    # ==================== Amounts ====================
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    discount: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0.00"))
    net_amount: Mapped[Decimal] = mapped_column(Money, nullable=False)

    # ==================== Status ====================
    status: Mapped[InvoiceStatus] = mapped_column(
        enum_type(InvoiceStatus, "invoice_status_enum"),
        nullable=False,
        default=InvoiceStatus.UNPAID,
        index=True,
    )
    issue_date: Mapped[Date] = mapped_column(SQLDate, nullable=False)
    due_date: Mapped[Date] = mapped_column(SQLDate, nullable=False, index=True)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    payment_method: Mapped[Optional[PaymentMethod]] = mapped_column(
        enum_type(PaymentMethod, "invoice_payment_method_enum"),
        nullable=True,
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<Invoice(id={self.id}, number='{self.invoice_number}', "
            f"net={self.net_amount}, status={self.status})>"
        )


class InvoiceSequence(Base):
    """Last invoice number handed out per gym. Locked for update while numbering."""

    __tablename__ = "invoice_sequences"

    gym_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    last_number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
