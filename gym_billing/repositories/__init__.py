"""
Repositories.

One repository per aggregate. Repositories flush but never commit; the
service layer's unit of work owns the transaction.
"""
from gym_billing.repositories.accounting import (
    AccountLedgerEntryRepository,
    AccountRepository,
    ExpenseCategoryRepository,
    ExpenseRepository,
)
from gym_billing.repositories.base import BaseRepository
from gym_billing.repositories.billing import (
    InvoiceRepository,
    InvoiceSequenceRepository,
    TransactionRepository,
)
from gym_billing.repositories.gym import GymSettingsRepository
from gym_billing.repositories.membership import (
    MemberRepository,
    PackageRepository,
    SubscriptionRepository,
    TrainerRepository,
)
from gym_billing.repositories.payroll import SalaryConfigRepository, SalarySlipRepository

__all__ = [
    "BaseRepository",
    "AccountRepository",
    "AccountLedgerEntryRepository",
    "ExpenseCategoryRepository",
    "ExpenseRepository",
    "InvoiceRepository",
    "InvoiceSequenceRepository",
    "TransactionRepository",
    "GymSettingsRepository",
    "MemberRepository",
    "PackageRepository",
    "SubscriptionRepository",
    "TrainerRepository",
    "SalaryConfigRepository",
    "SalarySlipRepository",
]
