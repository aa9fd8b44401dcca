"""
Service layer.

Each service owns one area of the billing core and runs every public
operation in its own unit of work. Operations take a ``GymContext`` first.
"""

from gym_billing.services.accounting import (
    AccountService,
    ExpenseCategoryService,
    ExpenseService,
    LedgerService,
)
from gym_billing.services.billing import InvoiceService, PaymentService
from gym_billing.services.gym import GymSettingsService
from gym_billing.services.membership import SubscriptionService
from gym_billing.services.payroll import SalaryConfigService, SalarySlipService

__all__ = [
    "AccountService",
    "ExpenseCategoryService",
    "ExpenseService",
    "LedgerService",
    "InvoiceService",
    "PaymentService",
    "GymSettingsService",
    "SubscriptionService",
    "SalaryConfigService",
    "SalarySlipService",
]
