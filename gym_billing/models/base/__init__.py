"""Shared model base classes and enums."""
from gym_billing.models.base.base_model import BaseModel, Money, TenantModel, TimestampModel, enum_type
from gym_billing.models.base.enums import (
    AccountType,
    InvoiceStatus,
    PaymentMethod,
    PaymentStatus,
    ReferenceType,
    SubscriptionStatus,
)

__all__ = [
    "BaseModel",
    "TimestampModel",
    "TenantModel",
    "Money",
    "enum_type",
    "AccountType",
    "InvoiceStatus",
    "PaymentMethod",
    "PaymentStatus",
    "ReferenceType",
    "SubscriptionStatus",
]
