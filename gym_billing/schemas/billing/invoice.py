# --- File: gym_billing/schemas/billing/invoice.py ---
"""
Invoice and payment schemas.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from gym_billing.models.base import InvoiceStatus, PaymentMethod
from gym_billing.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    MoneyAmount,
    NonNegativeMoney,
    PositiveMoney,
)

__all__ = [
    "InvoiceCreate",
    "InvoiceResponse",
    "PaymentCreate",
    "SettleInvoiceRequest",
    "TransactionResponse",
    "OverdueSweepResult",
    "RevenueSummary",
]


class InvoiceCreate(BaseCreateSchema):
    member_id: int
    subscription_id: int
    amount: NonNegativeMoney
    discount: NonNegativeMoney = Field(default=Decimal("0.00"))
    due_in_days: Optional[int] = Field(
        default=None,
        ge=0,
        description="Defaults to the gym's invoice_overdue_in_days",
    )
    notes: Optional[str] = None


class InvoiceResponse(BaseResponseSchema):
    """Invoice read model with payment totals and the status as of today."""

    member_id: int
    subscription_id: int
    invoice_number: str
    amount: MoneyAmount
    discount: MoneyAmount
    net_amount: MoneyAmount
    status: InvoiceStatus
    issue_date: date
    due_date: date
    paid_at: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = None
    amount_paid: MoneyAmount = Field(default=Decimal("0.00"))
    balance_due: MoneyAmount = Field(default=Decimal("0.00"))
    is_overdue: bool = Field(
        default=False,
        description="Unpaid balance past the due date, whatever the status",
    )


class PaymentCreate(BaseCreateSchema):
    account_id: int
    amount: PositiveMoney
    payment_method: PaymentMethod = PaymentMethod.CASH
    reference_number: Optional[str] = Field(default=None, max_length=64)
    notes: Optional[str] = None


class SettleInvoiceRequest(BaseSchema):
    account_id: int
    payment_method: PaymentMethod = PaymentMethod.CASH
    reference_number: Optional[str] = Field(default=None, max_length=64)


class TransactionResponse(BaseResponseSchema):
    invoice_id: int
    account_id: int
    ledger_entry_id: int
    amount: MoneyAmount
    payment_method: PaymentMethod
    reference_number: Optional[str] = None
    notes: Optional[str] = None
    paid_at: datetime


class OverdueSweepResult(BaseSchema):
    updated: int


class RevenueSummary(BaseSchema):
    month: int
    year: int
    total_revenue: MoneyAmount
