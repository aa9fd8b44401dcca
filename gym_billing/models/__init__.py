"""
ORM models.

Importing this package registers every table on ``Base.metadata``.
"""
from gym_billing.models.accounting import Account, AccountLedgerEntry, Expense, ExpenseCategory
from gym_billing.models.base import (
    AccountType,
    BaseModel,
    InvoiceStatus,
    PaymentMethod,
    PaymentStatus,
    ReferenceType,
    SubscriptionStatus,
    TenantModel,
    TimestampModel,
)
from gym_billing.models.billing import Invoice, InvoiceSequence, Transaction
from gym_billing.models.gym import GymSettingsRecord
from gym_billing.models.membership import Member, Package, Subscription, Trainer
from gym_billing.models.payroll import TrainerSalaryConfig, TrainerSalarySlip

__all__ = [
    "BaseModel",
    "TimestampModel",
    "TenantModel",
    "AccountType",
    "ReferenceType",
    "InvoiceStatus",
    "SubscriptionStatus",
    "PaymentStatus",
    "PaymentMethod",
    "Account",
    "AccountLedgerEntry",
    "Expense",
    "ExpenseCategory",
    "Invoice",
    "InvoiceSequence",
    "Transaction",
    "Member",
    "Package",
    "Subscription",
    "Trainer",
    "TrainerSalaryConfig",
    "TrainerSalarySlip",
    "GymSettingsRecord",
]
