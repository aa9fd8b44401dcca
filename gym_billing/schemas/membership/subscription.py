# --- File: gym_billing/schemas/membership/subscription.py ---
"""
Subscription schemas.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import Field

from gym_billing.models.base import SubscriptionStatus
from gym_billing.schemas.billing.invoice import InvoiceResponse
from gym_billing.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    MoneyAmount,
    NonNegativeMoney,
)

__all__ = [
    "SubscriptionCreate",
    "SubscriptionRenew",
    "SubscriptionCancel",
    "SubscriptionResponse",
    "SubscriptionWithInvoice",
]


class SubscriptionCreate(BaseCreateSchema):
    member_id: int
    package_id: int
    start_date: date
    price_paid: NonNegativeMoney
    trainer_id: Optional[int] = None
    trainer_addon_price: NonNegativeMoney = Field(default=Decimal("0.00"))
    notes: Optional[str] = None


class SubscriptionRenew(BaseSchema):
    package_id: int
    price_paid: NonNegativeMoney
    start_date: Optional[date] = Field(
        default=None,
        description="Defaults to the later of the old end date and tomorrow",
    )
    trainer_id: Optional[int] = None
    trainer_addon_price: NonNegativeMoney = Field(default=Decimal("0.00"))
    notes: Optional[str] = None


class SubscriptionCancel(BaseSchema):
    cancel_invoice: bool = False


class SubscriptionResponse(BaseResponseSchema):
    member_id: int
    package_id: int
    trainer_id: Optional[int] = None
    start_date: date
    end_date: date
    price_paid: MoneyAmount
    trainer_addon_price: MoneyAmount
    status: SubscriptionStatus
    notes: Optional[str] = None
    renewed_from_id: Optional[int] = None


class SubscriptionWithInvoice(BaseSchema):
    """A subscription and the invoice created with it."""

    subscription: SubscriptionResponse
    invoice: InvoiceResponse
