from gym_billing.repositories.accounting.account_repository import AccountRepository
from gym_billing.repositories.accounting.expense_category_repository import ExpenseCategoryRepository
from gym_billing.repositories.accounting.expense_repository import ExpenseRepository
from gym_billing.repositories.accounting.ledger_repository import AccountLedgerEntryRepository

__all__ = [
    "AccountRepository",
    "AccountLedgerEntryRepository",
    "ExpenseCategoryRepository",
    "ExpenseRepository",
]
